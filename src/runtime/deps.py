# =============================================================================
# Dependency Resolution
# =============================================================================
# The dispatcher only needs something with resolve(identifier). Container is
# the default: explicit registrations, constructor injection by parameter
# name or class annotation, lazily created AWS clients, and per-invocation
# child scopes (stage, Lambda context) that never touch the parent.
# =============================================================================

import inspect
import logging
import os
from typing import Any, Callable, Dict, Optional, Protocol

import boto3
from botocore.config import Config

from src.runtime.exceptions import ResolutionError

logger = logging.getLogger(__name__)

Factory = Callable[["Container"], Any]


class Resolver(Protocol):
    """Anything that can turn an identifier into an instance."""

    def resolve(self, identifier: Any) -> Any:
        ...


# =============================================================================
# AWS CLIENTS (lazy-loaded)
# =============================================================================

AWS_CLIENTS = {
    "s3": "s3",
    "sqs": "sqs",
    "sns": "sns",
    "eventbridge": "events",
    "stepfunctions": "stepfunctions",
    "lambda_client": "lambda",
}


def _aws_region() -> str:
    return os.environ.get("AWS_REGION", "ap-south-1")


def _client_config() -> Config:
    return Config(
        region_name=_aws_region(),
        retries={"max_attempts": 3, "mode": "standard"},
    )


def _client_factory(service: str) -> Factory:
    def factory(container: "Container") -> Any:
        logger.debug(f"Creating boto3 client: {service}")
        return boto3.client(service, config=_client_config())
    return factory


def _dynamodb_factory(container: "Container") -> Any:
    return boto3.resource("dynamodb", config=_client_config())


# =============================================================================
# CONTAINER
# =============================================================================

class Container:
    """
    Default resolver.

    Usage:
        container = Container()
        container.register_value("table_name", "orders")
        container.register_singleton(OrdersRepo, lambda c: OrdersRepo(c.resolve("dynamodb")))

        class OrdersController:
            def __init__(self, repo: OrdersRepo, stage: str = "dev"):
                ...

        container.resolve(OrdersController)
    """

    def __init__(self, parent: Optional["Container"] = None, with_aws: bool = True):
        self._parent = parent
        self._factories: Dict[Any, Factory] = {}
        self._singletons: Dict[Any, Any] = {}
        self._singleton_ids = set()

        if parent is None:
            from src.runtime.executor import UseCaseExecutor
            self.register("executor", lambda c: UseCaseExecutor(c))
            if with_aws:
                self._register_aws_clients()

    def _register_aws_clients(self) -> None:
        for name, service in AWS_CLIENTS.items():
            self.register_singleton(name, _client_factory(service))
        self.register_singleton("dynamodb", _dynamodb_factory)

    # ==========================================================================
    # Registration
    # ==========================================================================

    def register(self, identifier: Any, factory: Factory) -> "Container":
        """New instance from `factory(container)` on every resolve."""
        self._factories[identifier] = factory
        self._singleton_ids.discard(identifier)
        self._singletons.pop(identifier, None)
        return self

    def register_singleton(self, identifier: Any, factory: Factory) -> "Container":
        """`factory(container)` called once, on first resolve."""
        self.register(identifier, factory)
        self._singleton_ids.add(identifier)
        return self

    def register_value(self, identifier: Any, value: Any) -> "Container":
        self._factories.pop(identifier, None)
        self._singleton_ids.add(identifier)
        self._singletons[identifier] = value
        return self

    def child(self, **values: Any) -> "Container":
        """Scoped overlay holding per-invocation values."""
        scope = Container(parent=self)
        for name, value in values.items():
            scope.register_value(name, value)
        return scope

    def is_registered(self, identifier: Any) -> bool:
        if identifier in self._factories or identifier in self._singletons:
            return True
        return self._parent is not None and self._parent.is_registered(identifier)

    # ==========================================================================
    # Resolution
    # ==========================================================================

    def resolve(self, identifier: Any) -> Any:
        """
        Resolve an identifier to an instance.

        Raises:
            ResolutionError: nothing registered and `identifier` is not a
                constructible class
        """
        owner = self._owner_of(identifier)
        if owner is not None:
            return owner._resolve_registered(identifier, self)

        if inspect.isclass(identifier):
            return self._construct(identifier)

        raise ResolutionError(f"Nothing registered for {_describe(identifier)}")

    def _owner_of(self, identifier: Any) -> Optional["Container"]:
        scope: Optional[Container] = self
        while scope is not None:
            if identifier in scope._singletons or identifier in scope._factories:
                return scope
            scope = scope._parent
        return None

    def _resolve_registered(self, identifier: Any, requester: "Container") -> Any:
        if identifier in self._singletons:
            return self._singletons[identifier]

        factory = self._factories[identifier]
        if identifier in self._singleton_ids:
            # singletons are built against their owning scope
            instance = factory(self)
            self._singletons[identifier] = instance
            return instance
        return factory(requester)

    def _construct(self, cls: type) -> Any:
        try:
            signature = inspect.signature(cls.__init__)
        except (TypeError, ValueError):
            return cls()

        kwargs: Dict[str, Any] = {}
        for name, param in list(signature.parameters.items())[1:]:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if self.is_registered(name):
                kwargs[name] = self.resolve(name)
                continue
            annotation = param.annotation
            if inspect.isclass(annotation) and annotation is not inspect.Parameter.empty \
                    and annotation.__module__ != "builtins":
                kwargs[name] = self.resolve(annotation)
                continue
            if param.default is not param.empty:
                continue
            raise ResolutionError(
                f"Cannot resolve parameter '{name}' of {cls.__name__}"
            )

        try:
            return cls(**kwargs)
        except ResolutionError:
            raise
        except Exception as e:
            raise ResolutionError(f"Failed to construct {cls.__name__}: {e}") from e


def _describe(identifier: Any) -> str:
    return getattr(identifier, "__name__", None) or repr(identifier)


def create_container(with_aws: bool = True) -> Container:
    """Create a new root Container."""
    return Container(with_aws=with_aws)
