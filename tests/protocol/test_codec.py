"""Tests for the JSON-RPC envelope codec."""

from __future__ import annotations

import json

import pytest

from docmcp.protocol.codec import (
    DecodeError,
    decode_request,
    encode_error,
    encode_frame,
    encode_notification,
    encode_result,
)
from docmcp.protocol.errors import INVALID_REQUEST, PARSE_ERROR
from docmcp.protocol.models import JsonRpcRequest
from docmcp.subscriptions.models import ResourceNotification, UpdatedParams


class TestDecodeRequest:
    def test_valid_request(self) -> None:
        decoded = decode_request('{"jsonrpc": "2.0", "id": 7, "method": "tools/list"}')
        assert isinstance(decoded, JsonRpcRequest)
        assert decoded.id == 7
        assert decoded.method == "tools/list"
        assert decoded.params == {}

    def test_bytes_input(self) -> None:
        decoded = decode_request(b'{"jsonrpc": "2.0", "id": "a", "method": "ping"}')
        assert isinstance(decoded, JsonRpcRequest)
        assert decoded.id == "a"

    def test_mapping_input(self) -> None:
        decoded = decode_request({"id": 1, "method": "ping", "params": {"x": 1}})
        assert isinstance(decoded, JsonRpcRequest)
        assert decoded.params == {"x": 1}

    def test_null_params_become_empty(self) -> None:
        decoded = decode_request({"id": 1, "method": "ping", "params": None})
        assert isinstance(decoded, JsonRpcRequest)
        assert decoded.params == {}

    def test_request_without_id(self) -> None:
        decoded = decode_request({"method": "notifications/initialized"})
        assert isinstance(decoded, JsonRpcRequest)
        assert decoded.id is None

    def test_malformed_json_is_parse_error(self) -> None:
        decoded = decode_request("{not json")
        assert isinstance(decoded, DecodeError)
        assert decoded.code == PARSE_ERROR
        assert decoded.id is None
        assert decoded.detail

    def test_invalid_utf8_is_parse_error(self) -> None:
        decoded = decode_request(b"\xff\xfe\x00")
        assert isinstance(decoded, DecodeError)
        assert decoded.code == PARSE_ERROR

    def test_non_object_is_invalid_request(self) -> None:
        decoded = decode_request("[1, 2, 3]")
        assert isinstance(decoded, DecodeError)
        assert decoded.code == INVALID_REQUEST
        assert decoded.id is None

    @pytest.mark.parametrize("version", ["1.0", "2", 2.0, None])
    def test_wrong_version_is_invalid_request(self, version: object) -> None:
        decoded = decode_request({"jsonrpc": version, "id": 5, "method": "ping"})
        assert isinstance(decoded, DecodeError)
        assert decoded.code == INVALID_REQUEST
        assert decoded.id == 5
        assert decoded.detail.startswith("jsonrpc")

    def test_missing_version_defaults_to_2_0(self) -> None:
        decoded = decode_request({"id": 1, "method": "ping"})
        assert isinstance(decoded, JsonRpcRequest)
        assert decoded.jsonrpc == "2.0"

    def test_missing_method_keeps_id(self) -> None:
        decoded = decode_request('{"jsonrpc": "2.0", "id": 42}')
        assert isinstance(decoded, DecodeError)
        assert decoded.code == INVALID_REQUEST
        assert decoded.id == 42

    def test_non_string_method(self) -> None:
        decoded = decode_request({"id": "x", "method": 12})
        assert isinstance(decoded, DecodeError)
        assert decoded.code == INVALID_REQUEST
        assert decoded.id == "x"

    def test_non_scalar_id_is_dropped(self) -> None:
        decoded = decode_request({"id": {"nested": True}, "method": ""})
        assert isinstance(decoded, DecodeError)
        assert decoded.id is None

    def test_params_must_be_object(self) -> None:
        decoded = decode_request({"id": 3, "method": "ping", "params": [1, 2]})
        assert isinstance(decoded, DecodeError)
        assert decoded.code == INVALID_REQUEST
        assert decoded.id == 3
        assert "params" in decoded.detail


class TestDecodeErrorResponse:
    def test_to_response_carries_code_and_id(self) -> None:
        response = DecodeError(code=INVALID_REQUEST, message="Invalid Request", id=5, detail="bad").to_response()
        wire = response.to_wire()
        assert wire["id"] == 5
        assert wire["error"]["code"] == INVALID_REQUEST
        assert wire["error"]["data"] == "bad"
        assert "result" not in wire

    def test_to_response_without_detail_omits_data(self) -> None:
        wire = DecodeError(code=PARSE_ERROR, message="Parse error").to_response().to_wire()
        assert wire["id"] is None
        assert "data" not in wire["error"]


class TestEncode:
    def test_encode_result(self) -> None:
        wire = encode_result(1, {"tools": []}).to_wire()
        assert wire == {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}

    def test_encode_error(self) -> None:
        wire = encode_error("req", -32601, "Unknown method: x", {"method": "x"}).to_wire()
        assert wire["id"] == "req"
        assert wire["error"] == {"code": -32601, "message": "Unknown method: x", "data": {"method": "x"}}

    def test_encode_frame_is_single_line(self) -> None:
        line = encode_frame(encode_result(1, {"text": "a\nb"}))
        assert "\n" not in line
        assert json.loads(line)["result"]["text"] == "a\nb"

    def test_encode_frame_keeps_null_id(self) -> None:
        line = encode_frame(encode_error(None, PARSE_ERROR, "Parse error"))
        assert json.loads(line)["id"] is None

    def test_encode_frame_accepts_dict(self) -> None:
        assert json.loads(encode_frame({"a": 1})) == {"a": 1}

    def test_encode_notification_has_no_id(self) -> None:
        notification = ResourceNotification(
            params=UpdatedParams(uri="mcp://logs/info", subscription_id="sub_1_abcd", timestamp=10)
        )
        wire = json.loads(encode_notification(notification))
        assert "id" not in wire
        assert wire["method"] == "notifications/resources/updated"
        assert wire["params"] == {"uri": "mcp://logs/info", "subscriptionId": "sub_1_abcd", "timestamp": 10}
