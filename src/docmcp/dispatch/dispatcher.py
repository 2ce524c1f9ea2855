"""RequestDispatcher — routes decoded JSON-RPC requests to typed handlers.

The method table is a closed :class:`Method` enum resolved once at
construction, so an unknown method is a lookup miss that becomes
``-32601``.  Every request gets exactly one reply:

* a :class:`~docmcp.protocol.errors.ProtocolError` raised by a handler
  becomes an error envelope carrying its code;
* any other exception becomes ``-32603 Internal error`` with the exception
  message in ``data``;
* tool failures are ordinary results with ``isError: true``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from docmcp.catalog.catalog import Catalog
from docmcp.dispatch.cancellation import CancellationRegistry
from docmcp.dispatch.completion import CompletionProvider
from docmcp.dispatch.normalizer import normalize_tool_result
from docmcp.dispatch.resources import ResourceReader
from docmcp.protocol.codec import DecodeError, decode_request, encode_error, encode_result
from docmcp.protocol.errors import (
    InternalError,
    InvalidParamsError,
    MethodNotFoundError,
    ProtocolError,
)
from docmcp.protocol.models import JsonRpcRequest, JsonRpcResponse, ToolResult
from docmcp.subscriptions.registry import SubscriptionRegistry
from docmcp.utils.telemetry import ATTR_ERROR_CODE, ATTR_METHOD, ATTR_REQUEST_ID, get_tracer

if TYPE_CHECKING:
    from docmcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_CLIENT_ID = "default-client"


class Method(StrEnum):
    """Every method the server answers.  Aliases share a handler."""

    INITIALIZE = "initialize"
    INITIALIZED = "initialized"
    NOTIFICATIONS_INITIALIZED = "notifications/initialized"
    PING = "ping"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_TEMPLATES_LIST = "resources/templates/list"
    RESOURCES_READ = "resources/read"
    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"
    COMPLETION_COMPLETE = "completion/complete"
    NOTIFICATIONS_CANCELLED = "notifications/cancelled"
    RESOURCES_SUBSCRIBE = "resources/subscribe"
    SUBSCRIBE = "subscribe"
    RESOURCES_UNSUBSCRIBE = "resources/unsubscribe"
    UNSUBSCRIBE = "unsubscribe"
    RESOURCES_LIST_SUBSCRIPTIONS = "resources/list_subscriptions"
    LIST_SUBSCRIPTIONS = "listSubscriptions"
    RESOURCES_SUBSCRIPTION = "resources/subscription"
    GET_SUBSCRIPTION = "getSubscription"
    RESOURCES_SIMULATE_UPDATE = "resources/simulate_update"
    SIMULATE_RESOURCE_UPDATE = "simulateResourceUpdate"


Handler = Callable[[dict[str, Any]], dict[str, Any]]


class RequestDispatcher:
    """Turns one request frame into one response envelope.

    Stateless between requests apart from the subscription registry and
    cancellation flags, so :meth:`dispatch` may run on many threads at once.

    Usage::

        dispatcher = RequestDispatcher(catalog, tools, reader, registry)
        response = dispatcher.dispatch('{"jsonrpc":"2.0","id":1,"method":"ping"}')
        response.to_wire()  # {"jsonrpc": "2.0", "id": 1, "result": {}}
    """

    def __init__(
        self,
        catalog: Catalog,
        tools: ToolRegistry,
        resources: ResourceReader,
        registry: SubscriptionRegistry,
        *,
        completions: CompletionProvider | None = None,
        cancellations: CancellationRegistry | None = None,
    ) -> None:
        self.catalog = catalog
        self.tools = tools
        self.resources = resources
        self.registry = registry
        self.completions = completions or CompletionProvider()
        self.cancellations = cancellations or CancellationRegistry()

        subscribe = self._subscribe
        unsubscribe = self._unsubscribe
        list_subscriptions = self._list_subscriptions
        get_subscription = self._get_subscription
        simulate = self._simulate_update
        acknowledge = self._empty
        self._handlers: dict[Method, Handler] = {
            Method.INITIALIZE: self._initialize,
            Method.INITIALIZED: acknowledge,
            Method.NOTIFICATIONS_INITIALIZED: acknowledge,
            Method.PING: acknowledge,
            Method.TOOLS_LIST: self._tools_list,
            Method.TOOLS_CALL: self._tools_call,
            Method.RESOURCES_LIST: self._resources_list,
            Method.RESOURCES_TEMPLATES_LIST: self._resource_templates_list,
            Method.RESOURCES_READ: self._resources_read,
            Method.PROMPTS_LIST: self._prompts_list,
            Method.PROMPTS_GET: self._prompts_get,
            Method.COMPLETION_COMPLETE: self._complete,
            Method.NOTIFICATIONS_CANCELLED: self._cancel,
            Method.RESOURCES_SUBSCRIBE: subscribe,
            Method.SUBSCRIBE: subscribe,
            Method.RESOURCES_UNSUBSCRIBE: unsubscribe,
            Method.UNSUBSCRIBE: unsubscribe,
            Method.RESOURCES_LIST_SUBSCRIPTIONS: list_subscriptions,
            Method.LIST_SUBSCRIPTIONS: list_subscriptions,
            Method.RESOURCES_SUBSCRIPTION: get_subscription,
            Method.GET_SUBSCRIPTION: get_subscription,
            Method.RESOURCES_SIMULATE_UPDATE: simulate,
            Method.SIMULATE_RESOURCE_UPDATE: simulate,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def dispatch(self, raw: str | bytes | dict[str, Any]) -> JsonRpcResponse:
        """Decode *raw* and answer it.  Never raises."""
        decoded = decode_request(raw)
        if isinstance(decoded, DecodeError):
            logger.warning("Rejected frame: %s (%s)", decoded.message, decoded.detail)
            return decoded.to_response()
        return self.handle(decoded)

    async def dispatch_async(self, raw: str | bytes | dict[str, Any]) -> JsonRpcResponse:
        """Run :meth:`dispatch` on a worker thread."""
        return await asyncio.to_thread(self.dispatch, raw)

    def handle(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Answer an already decoded request.  Never raises."""
        with _tracer.start_as_current_span("mcp.request") as span:
            span.set_attribute(ATTR_METHOD, request.method)
            if request.id is not None:
                span.set_attribute(ATTR_REQUEST_ID, str(request.id))
            try:
                result = self._route(request)
            except ProtocolError as exc:
                logger.info("%s failed: %s", request.method, exc.message)
                span.set_attribute(ATTR_ERROR_CODE, exc.code)
                return encode_error(request.id, exc.code, exc.message, exc.data)
            except Exception as exc:
                logger.exception("Unhandled error in %s", request.method)
                error = InternalError(str(exc))
                span.set_attribute(ATTR_ERROR_CODE, error.code)
                return encode_error(request.id, error.code, error.message, error.data)
            return encode_result(request.id, result)

    @staticmethod
    def is_notification(request: JsonRpcRequest) -> bool:
        """Whether *request* arrived without an ``id`` and so expects no reply.

        An explicit ``"id": null`` still counts as a request.
        """
        return "id" not in request.model_fields_set

    def _route(self, request: JsonRpcRequest) -> dict[str, Any]:
        try:
            method = Method(request.method)
        except ValueError:
            raise MethodNotFoundError(request.method) from None
        logger.debug("Handling %s (id=%r)", method, request.id)
        return self._handlers[method](request.params)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        version = params.get("protocolVersion")
        client = params.get("clientInfo") or {}
        logger.info(
            "Initialize from %s %s (protocol %s)",
            client.get("name", "unknown") if isinstance(client, dict) else "unknown",
            client.get("version", "") if isinstance(client, dict) else "",
            version or "default",
        )
        return self.catalog.describe_server(version if isinstance(version, str) and version else None)

    def _empty(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": [t.model_dump(by_alias=True) for t in self.catalog.list_tools()]}

    def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = _require_str(params, "name")
        if not (self.catalog.has_tool(name) and self.tools.has(name)):
            available = ", ".join(self.catalog.tool_names())
            logger.warning("Call for unknown tool %s", name)
            return ToolResult.from_text(
                f"Tool not found: {name}. Available tools: {available}", is_error=True
            ).to_wire()
        raw = self.tools.call(name, params.get("arguments"))
        return normalize_tool_result(raw).to_wire()

    # ------------------------------------------------------------------
    # Resources and prompts
    # ------------------------------------------------------------------

    def _resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"resources": [r.model_dump(by_alias=True) for r in self.catalog.list_resources()]}

    def _resource_templates_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {
            "resourceTemplates": [
                t.model_dump(by_alias=True) for t in self.catalog.list_resource_templates()
            ]
        }

    def _resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        uri = _require_str(params, "uri")
        return {"contents": [c.to_wire() for c in self.resources.read(uri)]}

    def _prompts_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"prompts": [p.model_dump(by_alias=True) for p in self.catalog.list_prompts()]}

    def _prompts_get(self, params: dict[str, Any]) -> dict[str, Any]:
        return self.catalog.get_prompt(_require_str(params, "name"))

    def _complete(self, params: dict[str, Any]) -> dict[str, Any]:
        argument = params.get("argument")
        text: Any = argument.get("value") if isinstance(argument, dict) else None
        if text is None:
            text = params.get("text", "")
        if not isinstance(text, str):
            raise InvalidParamsError("'argument.value' must be a string")
        position = params.get("position")
        if position is not None and (isinstance(position, bool) or not isinstance(position, int)):
            raise InvalidParamsError("'position' must be an integer")
        return self.completions.complete(text, position)

    def _cancel(self, params: dict[str, Any]) -> dict[str, Any]:
        token = params.get("progressToken", params.get("requestId"))
        if token is None or isinstance(token, dict | list):
            logger.warning("Cancellation without a progress token")
            return {"cancelled": False, "error": "No progress token provided"}
        self.cancellations.cancel(token)
        logger.info("Cancelled operation %r", token)
        return {"cancelled": True, "progressToken": token}

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def _subscribe(self, params: dict[str, Any]) -> dict[str, Any]:
        uri = _require_str(params, "uri")
        client_id = params.get("clientId") or DEFAULT_CLIENT_ID
        if not isinstance(client_id, str):
            raise InvalidParamsError("'clientId' must be a string")
        subscription_id = self.registry.subscribe(uri, client_id)
        return {
            "subscriptionId": subscription_id,
            "uri": uri,
            "status": "subscribed",
            "message": f"Subscribed {client_id} to {uri}",
        }

    def _unsubscribe(self, params: dict[str, Any]) -> dict[str, Any]:
        subscription_id = _require_str(params, "subscriptionId")
        outcome = self.registry.unsubscribe(subscription_id)
        result: dict[str, Any] = {"subscriptionId": subscription_id, "status": outcome.status}
        if outcome.removed is not None:
            result["uri"] = outcome.removed.uri
        else:
            result["error"] = "Subscription not found"
        return result

    def _list_subscriptions(self, params: dict[str, Any]) -> dict[str, Any]:
        views = [s.to_view().model_dump(by_alias=True) for s in self.registry.list_subscriptions()]
        return {"subscriptions": views, "totalCount": len(views)}

    def _get_subscription(self, params: dict[str, Any]) -> dict[str, Any]:
        subscription_id = _require_str(params, "subscriptionId")
        subscription = self.registry.get_details(subscription_id)
        if subscription is None:
            return {"error": "Subscription not found", "subscriptionId": subscription_id}
        return subscription.to_wire()

    def _simulate_update(self, params: dict[str, Any]) -> dict[str, Any]:
        update = self.registry.simulate_update(_require_str(params, "uri"))
        return {"uri": update.uri, "status": update.status, "timestamp": update.timestamp}


def _require_str(params: dict[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value:
        msg = f"'{key}' is required and must be a non-empty string"
        raise InvalidParamsError(msg)
    return value
