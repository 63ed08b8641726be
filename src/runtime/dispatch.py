# =============================================================================
# Dispatcher
# =============================================================================
# Single entry point for every Lambda invocation. One event in, one envelope
# out; nothing raised past dispatch().
#
# HTTP events     -> route table -> controller method -> {statusCode, headers, body}
# Listener events -> event-name table, then pattern listeners in registration
#                    order -> listener.handle() -> {success, matchType, body}
#                    (or the raw/HTTP-shaped Response override)
# =============================================================================

import asyncio
import inspect
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from src.runtime.config import CorsConfig, DispatcherConfig
from src.runtime.cors import cors_headers
from src.runtime.deps import Container
from src.runtime.descriptors import LISTENER_EVENT_NAME, LISTENER_PATTERN
from src.runtime.envelope import Envelope
from src.runtime.exceptions import (
    HttpException,
    ResolutionError,
    RoutingError,
    status_code_for,
)
from src.runtime.parse_event import parse_event
from src.runtime.registry import Registry, register
from src.runtime.response import JSON_CONTENT_TYPE, jdump, normalize_http, normalize_listener

logger = logging.getLogger(__name__)

MAX_KEYS_IN_ERROR = 10
PATTERN_MATCHED = "pattern-matched"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class Dispatcher:
    """
    Routes Lambda events to controllers and listeners.

    Usage:
        dispatcher = Dispatcher(
            controllers=[ItemsController],
            listeners=[UserCreatedListener, S3UploadListener],
            cors={"enabled": True, "allowOrigins": ["https://app.example.com"]},
        )

        def lambda_handler(event, context):
            return dispatcher(event, context)

    Raises:
        RuntimeConfigurationError: invalid controllers/listeners (at construction)
    """

    def __init__(
        self,
        controllers: Sequence[type],
        listeners: Optional[Sequence[type]] = None,
        cors: Any = None,
        container: Any = None,
    ):
        self._registry: Registry = register(controllers, listeners)
        self._cors: CorsConfig = CorsConfig.coerce(cors)
        self._container = container if container is not None else Container()

    @classmethod
    def from_config(cls, config: DispatcherConfig) -> "Dispatcher":
        return cls(
            controllers=config.controllers,
            listeners=config.listeners,
            cors=config.cors,
            container=config.container,
        )

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def cors(self) -> CorsConfig:
        return self._cors

    def __call__(self, event: Any, context: Any = None) -> Any:
        return self.dispatch(event, context)

    # ==========================================================================
    # Entry point
    # ==========================================================================

    def dispatch(self, event: Any, context: Any = None) -> Any:
        """
        Dispatch one event.

        Args:
            event: Raw Lambda event
            context: Lambda context (optional; supplies request id and stage)

        Returns:
            HTTP envelope, listener envelope, or a handler's raw Response body
        """
        envelope = parse_event(
            event,
            context,
            has_pattern_listeners=self._registry.listener_table.has_patterns,
        )
        logger.info(
            f"Dispatching kind={envelope.kind.value} source={envelope.source} "
            f"stage={envelope.stage} requestId={envelope.request_id}"
        )

        if envelope.is_listener_event:
            return self._dispatch_listener(envelope, context)
        return self._dispatch_http(envelope, context)

    # ==========================================================================
    # Listener dispatch
    # ==========================================================================

    def _select_listener(self, envelope: Envelope) -> Tuple[Optional[type], Optional[str]]:
        """Event name first, then the first matching pattern listener."""
        table = self._registry.listener_table

        if envelope.event_name is not None:
            cls = table.for_name(envelope.event_name)
            if cls is not None:
                return cls, LISTENER_EVENT_NAME

        cls = table.first_match(envelope.raw_event)
        if cls is not None:
            return cls, LISTENER_PATTERN

        return None, None

    def _dispatch_listener(self, envelope: Envelope, context: Any) -> Any:
        try:
            cls, match_type = self._select_listener(envelope)
            if cls is None:
                raise RoutingError(_unrouted_listener_message(envelope))

            logger.info(f"Listener {cls.__name__} selected by {match_type}")

            instance = self._resolve(cls, envelope, context)
            handle = getattr(instance, "handle", None)
            if not callable(handle):
                raise ResolutionError(f"Listener {cls.__name__} has no handle() method")

            result = _await_result(handle(envelope.raw_event))
            return normalize_listener(result, match_type)

        except Exception as e:
            _log_dispatch_error(e, envelope)
            return {
                "success": False,
                "body": {
                    "message": _message_of(e),
                    "event": envelope.event_name or PATTERN_MATCHED,
                },
            }

    # ==========================================================================
    # HTTP dispatch
    # ==========================================================================

    def _dispatch_http(self, envelope: Envelope, context: Any) -> Dict[str, Any]:
        headers = cors_headers(self._cors, envelope.origin)

        try:
            try:
                result = self._invoke_controller(envelope, context)
            except Exception as e:
                _log_dispatch_error(e, envelope)
                return self._http_error(status_code_for(e), _message_of(e), envelope, headers)

            response = normalize_http(result)
        except Exception:
            logger.exception(f"Unexpected dispatch failure requestId={envelope.request_id}")
            return self._http_error(500, INTERNAL_ERROR_MESSAGE, envelope, headers)

        response["headers"] = {**headers, **response.get("headers", {})}
        return response

    def _invoke_controller(self, envelope: Envelope, context: Any) -> Any:
        verb, resource = envelope.http_method, envelope.resource

        found = self._registry.route_table.lookup(verb, resource)
        if found is None:
            raise RoutingError(f"Unregistered route for {verb} {resource}")

        cls, method_name = found
        if cls is None:
            raise ResolutionError(f"No controller registered for route {verb} {resource}")

        logger.info(f"Route {verb} {resource} -> {cls.__name__}.{method_name}")

        instance = self._resolve(cls, envelope, context)
        method = getattr(instance, method_name, None)
        if not callable(method):
            raise ResolutionError(f"Controller {cls.__name__} has no method '{method_name}'")

        return _await_result(method(envelope.raw_event))

    def _http_error(self, status_code: int, message: str, envelope: Envelope,
                    headers: Dict[str, str]) -> Dict[str, Any]:
        return {
            "statusCode": status_code,
            "headers": {**headers, "Content-Type": JSON_CONTENT_TYPE},
            "body": jdump({"message": message, "requestId": envelope.request_id}),
        }

    # ==========================================================================
    # Resolution
    # ==========================================================================

    def _resolve(self, cls: type, envelope: Envelope, context: Any) -> Any:
        """Resolve a handler class in a scope holding this invocation's stage/context."""
        resolver = self._container
        child = getattr(resolver, "child", None)
        if callable(child):
            resolver = child(stage=envelope.stage, context=context, request_id=envelope.request_id)

        instance = resolver.resolve(cls)
        if instance is None:
            raise ResolutionError(f"Resolver returned nothing for {cls.__name__}")
        return instance


# =============================================================================
# HELPERS
# =============================================================================

def _await_result(result: Any) -> Any:
    """Drive an awaitable handler result to completion."""
    if inspect.isawaitable(result):
        return asyncio.run(_wait_for(result))
    return result


async def _wait_for(awaitable: Any) -> Any:
    return await awaitable


def _unrouted_listener_message(envelope: Envelope) -> str:
    if envelope.event_name:
        return f"Unregistered listener for event: {envelope.event_name}"

    keys: List[str] = envelope.top_level_keys
    shown = ", ".join(keys[:MAX_KEYS_IN_ERROR]) or "(none)"
    if len(keys) > MAX_KEYS_IN_ERROR:
        shown += ", ..."
    return f"No pattern-matched listener found for event with keys: {shown}"


def _message_of(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _log_dispatch_error(exc: BaseException, envelope: Envelope) -> None:
    if isinstance(exc, (RoutingError, HttpException)):
        logger.warning(f"{type(exc).__name__}: {exc} requestId={envelope.request_id}")
    else:
        logger.exception(f"Handler error: {exc} requestId={envelope.request_id}")
