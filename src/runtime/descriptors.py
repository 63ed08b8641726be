# =============================================================================
# Descriptors - Controller and Listener Declarations
# =============================================================================
# A controller is described by a base path plus per-verb local routes; a
# listener by an event name or a match config. Descriptors are plain frozen
# dataclasses stored on the class itself, so two dispatchers built from
# different class lists never share state.
#
# Usage:
#     @controller("/api/items")
#     class ItemsController:
#         @get("/:id")
#         def get_item(self, event): ...
#
#     @listener("user.created")
#     class UserCreatedListener:
#         def handle(self, event): ...
#
#     @listener(match={"Records[0].eventSource": "aws:s3"})
#     class S3Listener:
#         def handle(self, event): ...
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

CONTROLLER_ATTR = "__controller_descriptor__"
LISTENER_ATTR = "__listener_descriptor__"
ROUTES_ATTR = "__http_routes__"

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

LISTENER_EVENT_NAME = "eventName"
LISTENER_PATTERN = "pattern"


@dataclass(frozen=True)
class ControllerDescriptor:
    """
    Routing declaration for one controller.

    Attributes:
        base_path: Prefix shared by every route, e.g. "/api/items"
        routes: {verb: {local_path: method_name}}
    """
    base_path: str
    routes: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def full_routes(self) -> Dict[str, Dict[str, str]]:
        """{verb: {base_path + local_path: "base_path|method_name"}}."""
        return {
            verb: {
                f"{self.base_path}{local}": f"{self.base_path}|{method}"
                for local, method in fragments.items()
            }
            for verb, fragments in self.routes.items()
        }


@dataclass(frozen=True)
class ListenerDescriptor:
    """Either an event name or a path->pattern match config."""
    event_name: Optional[str] = None
    match: Optional[Dict[str, Any]] = None

    @property
    def kind(self) -> str:
        return LISTENER_EVENT_NAME if self.event_name is not None else LISTENER_PATTERN

    @classmethod
    def from_config(cls, config: Any) -> "ListenerDescriptor":
        """Accept "name", {"match": {...}} or a bare {path: pattern} mapping."""
        if isinstance(config, str):
            return cls(event_name=config)
        if isinstance(config, Mapping):
            inner = config.get("match") if set(config.keys()) == {"match"} else config
            if isinstance(inner, Mapping):
                return cls(match=dict(inner))
        raise TypeError(f"Listener config must be an event name or a match config, got {config!r}")


# =============================================================================
# EXPLICIT BUILDERS
# =============================================================================

def describe_controller(cls: type, base_path: str,
                        routes: Dict[str, Dict[str, str]]) -> type:
    """Attach a ControllerDescriptor to `cls` without decorators."""
    normalized = {verb.upper(): dict(fragments) for verb, fragments in routes.items()}
    setattr(cls, CONTROLLER_ATTR, ControllerDescriptor(base_path=base_path, routes=normalized))
    return cls


def describe_listener(cls: type, config: Any = None, *,
                      match: Optional[Dict[str, Any]] = None) -> type:
    """Attach a ListenerDescriptor to `cls` without decorators."""
    descriptor = ListenerDescriptor(match=dict(match)) if match is not None \
        else ListenerDescriptor.from_config(config)
    setattr(cls, LISTENER_ATTR, descriptor)
    return cls


def get_controller_descriptor(cls: Any) -> Optional[ControllerDescriptor]:
    # vars() so a subclass doesn't inherit its parent's routes
    return vars(cls).get(CONTROLLER_ATTR) if isinstance(cls, type) else None


def get_listener_descriptor(cls: Any) -> Optional[ListenerDescriptor]:
    return vars(cls).get(LISTENER_ATTR) if isinstance(cls, type) else None


# =============================================================================
# DECORATORS
# =============================================================================

def route(verb: str, path: str = "") -> Callable:
    """Mark a controller method as the target of `verb path`."""
    def decorator(func: Callable) -> Callable:
        marks: List[Tuple[str, str]] = list(getattr(func, ROUTES_ATTR, []))
        marks.append((verb.upper(), path))
        setattr(func, ROUTES_ATTR, marks)
        return func
    return decorator


def get(path: str = "") -> Callable:
    return route("GET", path)


def post(path: str = "") -> Callable:
    return route("POST", path)


def put(path: str = "") -> Callable:
    return route("PUT", path)


def patch(path: str = "") -> Callable:
    return route("PATCH", path)


def delete(path: str = "") -> Callable:
    return route("DELETE", path)


def controller(base_path: str) -> Callable[[type], type]:
    """Class decorator collecting @get/@post/... methods into a descriptor."""
    def decorator(cls: type) -> type:
        routes: Dict[str, Dict[str, str]] = {}
        for name in dir(cls):
            member = getattr(cls, name, None)
            for verb, local in getattr(member, ROUTES_ATTR, []):
                routes.setdefault(verb, {})[local] = name
        return describe_controller(cls, base_path, routes)
    return decorator


def listener(config: Union[str, Dict[str, Any], None] = None, *,
             match: Optional[Dict[str, Any]] = None) -> Callable[[type], type]:
    """Class decorator registering an event name or a match config."""
    def decorator(cls: type) -> type:
        return describe_listener(cls, config, match=match)
    return decorator
