# =============================================================================
# Registry - Route Table and Listener Table
# =============================================================================
# Built once from controller/listener classes when a Dispatcher is created.
# Tables are read-only afterwards; dispatch only ever reads them.
#
# Route table:    {verb: {"/base/local": "/base|method_name"}}
# Listener table: {event_name: cls} plus an ordered [(match, cls)] list where
#                 the first registered pattern wins.
# =============================================================================

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from src.runtime.descriptors import (
    HTTP_METHODS,
    LISTENER_EVENT_NAME,
    get_controller_descriptor,
    get_listener_descriptor,
)
from src.runtime.exceptions import RuntimeConfigurationError
from src.runtime.patterns import matches_patterns

logger = logging.getLogger(__name__)

DESTINATION_SEPARATOR = "|"


def split_destination(destination: str) -> Tuple[str, str]:
    """"/api/items|get_item" -> ("/api/items", "get_item")."""
    base_path, _, method_name = destination.rpartition(DESTINATION_SEPARATOR)
    return base_path, method_name


class RouteTable:
    """(verb, resource path) -> controller class and method name."""

    def __init__(self, routes: Dict[str, Dict[str, str]], controllers: Dict[str, type]):
        self._routes = MappingProxyType(
            {verb: MappingProxyType(dict(paths)) for verb, paths in routes.items()}
        )
        self._controllers = MappingProxyType(dict(controllers))

    @property
    def routes(self) -> Mapping[str, Mapping[str, str]]:
        return self._routes

    @property
    def controllers(self) -> Mapping[str, type]:
        return self._controllers

    def destination(self, verb: str, resource: str) -> Optional[str]:
        if not isinstance(verb, str) or not isinstance(resource, str):
            return None
        return self._routes.get(verb.upper(), {}).get(resource)

    def lookup(self, verb: str, resource: str) -> Optional[Tuple[Optional[type], str]]:
        """Controller class (None if the base path is unknown) and method name."""
        destination = self.destination(verb, resource)
        if destination is None:
            return None
        base_path, method_name = split_destination(destination)
        return self._controllers.get(base_path), method_name

    def __len__(self) -> int:
        return sum(len(paths) for paths in self._routes.values())


class ListenerTable:
    """Exact event-name map plus ordered pattern listeners."""

    def __init__(self, by_name: Dict[str, type], patterns: List[Tuple[Dict[str, Any], type]]):
        self._by_name = MappingProxyType(dict(by_name))
        self._patterns: Tuple[Tuple[Mapping[str, Any], type], ...] = tuple(
            (MappingProxyType(dict(match)), cls) for match, cls in patterns
        )

    @property
    def by_name(self) -> Mapping[str, type]:
        return self._by_name

    @property
    def patterns(self) -> Tuple[Tuple[Mapping[str, Any], type], ...]:
        return self._patterns

    @property
    def has_patterns(self) -> bool:
        return bool(self._patterns)

    def for_name(self, event_name: Any) -> Optional[type]:
        if not isinstance(event_name, str):
            return None
        return self._by_name.get(event_name)

    def first_match(self, event: Any) -> Optional[type]:
        """First registered pattern listener whose config matches `event`."""
        for match, cls in self._patterns:
            if matches_patterns(event, match):
                return cls
        return None


@dataclass(frozen=True)
class Registry:
    route_table: RouteTable
    listener_table: ListenerTable


# =============================================================================
# REGISTRATION
# =============================================================================

def register(controllers: Sequence[Any], listeners: Optional[Sequence[Any]] = None) -> Registry:
    """
    Build route and listener tables.

    Raises:
        RuntimeConfigurationError: empty controller list, a non-class entry,
            or a non-list listeners argument
    """
    _validate_classes(controllers, listeners)

    routes: Dict[str, Dict[str, str]] = {}
    by_base_path: Dict[str, type] = {}

    for cls in controllers:
        descriptor = get_controller_descriptor(cls)
        if descriptor is None:
            logger.warning(f"Skipping controller {cls.__name__}: no route declaration")
            continue

        if descriptor.base_path in by_base_path:
            logger.warning(
                f"Controller {cls.__name__} replaces {by_base_path[descriptor.base_path].__name__} "
                f"for base path {descriptor.base_path}"
            )
        by_base_path[descriptor.base_path] = cls

        for verb, fragments in descriptor.full_routes().items():
            if verb not in HTTP_METHODS:
                logger.warning(f"Controller {cls.__name__} declares unsupported method {verb}")
            table = routes.setdefault(verb, {})
            for path, destination in fragments.items():
                if path in table:
                    logger.warning(f"Route {verb} {path} redefined by {cls.__name__}")
                table[path] = destination

    by_name: Dict[str, type] = {}
    patterns: List[Tuple[Dict[str, Any], type]] = []

    for cls in listeners or []:
        descriptor = get_listener_descriptor(cls)
        if descriptor is None:
            logger.warning(f"Skipping listener {cls.__name__}: no listener declaration")
            continue

        if descriptor.kind == LISTENER_EVENT_NAME:
            by_name[descriptor.event_name] = cls
        else:
            patterns.append((descriptor.match or {}, cls))

    route_table = RouteTable(routes, by_base_path)
    listener_table = ListenerTable(by_name, patterns)

    logger.info(
        f"Registered {len(route_table)} routes from {len(by_base_path)} controllers, "
        f"{len(by_name)} event-name listeners, {len(patterns)} pattern listeners"
    )
    return Registry(route_table=route_table, listener_table=listener_table)


def _validate_classes(controllers: Any, listeners: Any) -> None:
    if not isinstance(controllers, (list, tuple)) or not controllers:
        raise RuntimeConfigurationError("At least one controller is required")

    for i, cls in enumerate(controllers):
        if not isinstance(cls, type):
            raise RuntimeConfigurationError(f"Controller at index {i} must be a class constructor")

    if listeners is None:
        return

    if not isinstance(listeners, (list, tuple)):
        raise RuntimeConfigurationError("Listeners must be an array")

    for i, cls in enumerate(listeners):
        if not isinstance(cls, type):
            raise RuntimeConfigurationError(f"Listener at index {i} must be a class constructor")
