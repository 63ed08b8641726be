# =============================================================================
# Runtime Package - Lambda Event Dispatch
# =============================================================================
# Routes one Lambda event per call to:
# - controllers (API Gateway proxy events, exact verb + resource routing)
# - listeners (named events, or structural pattern matching over any JSON:
#   S3, SQS, SNS, EventBridge, Cognito, Bedrock agent actions, ...)
# =============================================================================

from src.runtime.config import CorsConfig, DispatcherConfig
from src.runtime.deps import Container, Resolver, create_container
from src.runtime.descriptors import (
    ControllerDescriptor,
    ListenerDescriptor,
    controller,
    delete,
    describe_controller,
    describe_listener,
    get,
    listener,
    patch,
    post,
    put,
    route,
)
from src.runtime.dispatch import Dispatcher
from src.runtime.envelope import Envelope, EnvelopeKind
from src.runtime.exceptions import (
    BadGatewayException,
    ConflictException,
    ForbiddenException,
    HttpException,
    InternalServerErrorException,
    ResolutionError,
    ResourceNotFoundException,
    RoutingError,
    RuntimeConfigurationError,
    ServiceUnavailableException,
    TooManyRequestsException,
    UnauthorizedException,
    UnprocessableEntityException,
    ValidationException,
)
from src.runtime.executor import UseCaseExecutor
from src.runtime.parse_event import EventSource, classify_event, detect_event_source, parse_event
from src.runtime.paths import NOT_FOUND, extract_value
from src.runtime.patterns import match_pattern, matches_patterns
from src.runtime.registry import ListenerTable, Registry, RouteTable, register
from src.runtime.response import Response

__all__ = [
    "BadGatewayException",
    "ConflictException",
    "Container",
    "ControllerDescriptor",
    "CorsConfig",
    "Dispatcher",
    "DispatcherConfig",
    "Envelope",
    "EnvelopeKind",
    "EventSource",
    "ForbiddenException",
    "HttpException",
    "InternalServerErrorException",
    "ListenerDescriptor",
    "ListenerTable",
    "NOT_FOUND",
    "Registry",
    "ResolutionError",
    "Resolver",
    "ResourceNotFoundException",
    "Response",
    "RouteTable",
    "RoutingError",
    "RuntimeConfigurationError",
    "ServiceUnavailableException",
    "TooManyRequestsException",
    "UnauthorizedException",
    "UnprocessableEntityException",
    "UseCaseExecutor",
    "ValidationException",
    "classify_event",
    "controller",
    "create_container",
    "delete",
    "describe_controller",
    "describe_listener",
    "detect_event_source",
    "extract_value",
    "get",
    "listener",
    "match_pattern",
    "matches_patterns",
    "parse_event",
    "patch",
    "post",
    "put",
    "register",
    "route",
]
