"""Tests for the stdio transport."""

from __future__ import annotations

import io
import json
from typing import Any

from docmcp.server.app import Application
from docmcp.server.stdio import StdioServer


def _frames(output: io.StringIO) -> list[dict[str, Any]]:
    return [json.loads(line) for line in output.getvalue().splitlines() if line.strip()]


def _serve(app: Application, *lines: str, max_workers: int = 4) -> list[dict[str, Any]]:
    stdin = io.StringIO("".join(line + "\n" for line in lines))
    stdout = io.StringIO()
    StdioServer(app.dispatcher, max_workers=max_workers, stdin=stdin, stdout=stdout).serve()
    return _frames(stdout)


class TestServe:
    def test_replies_to_every_request(self, app: Application) -> None:
        frames = _serve(
            app,
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}),
            json.dumps({"jsonrpc": "2.0", "id": 2, "method": "tools/list"}),
            json.dumps({"jsonrpc": "2.0", "id": 3, "method": "resources/list"}),
        )
        assert sorted(f["id"] for f in frames) == [1, 2, 3]
        assert all("result" in f for f in frames)

    def test_notifications_get_no_reply(self, app: Application) -> None:
        frames = _serve(
            app,
            json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
            json.dumps({"jsonrpc": "2.0", "id": 7, "method": "ping"}),
        )
        assert frames == [{"jsonrpc": "2.0", "id": 7, "result": {}}]

    def test_notification_method_with_id_is_answered(self, app: Application) -> None:
        frames = _serve(
            app,
            json.dumps(
                {"jsonrpc": "2.0", "id": 9, "method": "notifications/cancelled", "params": {"progressToken": "t"}}
            ),
            json.dumps({"jsonrpc": "2.0", "id": 10, "method": "initialized"}),
        )
        by_id = {f["id"]: f for f in frames}
        assert len(frames) == 2
        assert by_id[9]["result"] == {"cancelled": True, "progressToken": "t"}
        assert by_id[10]["result"] == {}

    def test_request_method_without_id_gets_no_reply(self, app: Application) -> None:
        assert _serve(app, json.dumps({"jsonrpc": "2.0", "method": "ping"})) == []

    def test_malformed_line_gets_parse_error(self, app: Application) -> None:
        frames = _serve(app, "{oops")
        assert frames[0]["id"] is None
        assert frames[0]["error"]["code"] == -32700

    def test_blank_lines_skipped(self, app: Application) -> None:
        frames = _serve(app, "", "   ", json.dumps({"jsonrpc": "2.0", "id": 1, "method": "ping"}))
        assert len(frames) == 1

    def test_many_concurrent_requests(self, app: Application) -> None:
        lines = [
            json.dumps(
                {"jsonrpc": "2.0", "id": i, "method": "resources/subscribe", "params": {"uri": "mcp://logs/info"}}
            )
            for i in range(100)
        ]
        frames = _serve(app, *lines, max_workers=8)
        assert sorted(f["id"] for f in frames) == list(range(100))
        assert len(app.registry) == 100


class TestNotifications:
    def test_simulated_update_is_written(self, app: Application) -> None:
        stdout = io.StringIO()
        server = app.stdio_server(stdin=io.StringIO(""), stdout=stdout)
        sub_id = app.registry.subscribe("mcp://logs/debug", "client-A")

        server.handle_line(
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "simulateResourceUpdate", "params": {"uri": "mcp://logs/debug"}})
        )

        frames = _frames(stdout)
        notification = next(f for f in frames if f.get("method") == "notifications/resources/updated")
        assert "id" not in notification
        assert notification["params"]["subscriptionId"] == sub_id
        reply = next(f for f in frames if f.get("id") == 1)
        assert reply["result"]["status"] == "updated"

    def test_deliver_writes_one_line(self, app: Application) -> None:
        stdout = io.StringIO()
        server = StdioServer(app.dispatcher, stdout=stdout)
        app.registry.set_sink(server)
        app.registry.subscribe("mcp://logs/info", "client-A")
        app.registry.notify_resource_updated("mcp://logs/info")
        assert len(stdout.getvalue().splitlines()) == 1

    def test_closed_stream_does_not_raise(self, app: Application) -> None:
        stdout = io.StringIO()
        server = StdioServer(app.dispatcher, stdout=stdout)
        stdout.close()
        server.handle_line(json.dumps({"jsonrpc": "2.0", "id": 1, "method": "ping"}))
