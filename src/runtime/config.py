# =============================================================================
# Configuration
# =============================================================================
# Dispatcher options. CORS can be given explicitly (dict or CorsConfig) or
# read from the Lambda environment:
#   CORS_ENABLED, CORS_ALLOW_ORIGINS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS,
#   CORS_EXPOSE_HEADERS, CORS_CREDENTIALS, CORS_MAX_AGE
# =============================================================================

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def _get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _get_env_bool(key: str, default: bool = False) -> bool:
    return _get_env(key, str(default)).lower() == "true"


def _get_env_list(key: str) -> List[str]:
    return [item.strip() for item in _get_env(key).split(",") if item.strip()]


def _get_env_int(key: str) -> Optional[int]:
    raw = _get_env(key).strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key}={raw!r}")
        return None


@dataclass
class CorsConfig:
    """Cross-origin settings applied to every HTTP envelope."""
    enabled: bool = False
    allow_origins: List[str] = field(default_factory=list)
    allow_methods: List[str] = field(default_factory=list)
    allow_headers: List[str] = field(default_factory=list)
    expose_headers: List[str] = field(default_factory=list)
    credentials: bool = False
    max_age: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CorsConfig":
        """Build from camelCase options: {"enabled": True, "allowOrigins": [...], ...}."""
        if not data:
            return cls()
        max_age = data.get("maxAge")
        return cls(
            enabled=bool(data.get("enabled", False)),
            allow_origins=list(data.get("allowOrigins") or []),
            allow_methods=list(data.get("allowMethods") or []),
            allow_headers=list(data.get("allowHeaders") or []),
            expose_headers=list(data.get("exposeHeaders") or []),
            credentials=data.get("credentials") is True,
            max_age=max_age if isinstance(max_age, (int, float)) and not isinstance(max_age, bool) else None,
        )

    @classmethod
    def from_env(cls) -> "CorsConfig":
        """Build from CORS_* environment variables."""
        return cls(
            enabled=_get_env_bool("CORS_ENABLED"),
            allow_origins=_get_env_list("CORS_ALLOW_ORIGINS"),
            allow_methods=_get_env_list("CORS_ALLOW_METHODS"),
            allow_headers=_get_env_list("CORS_ALLOW_HEADERS"),
            expose_headers=_get_env_list("CORS_EXPOSE_HEADERS"),
            credentials=_get_env_bool("CORS_CREDENTIALS"),
            max_age=_get_env_int("CORS_MAX_AGE"),
        )

    @classmethod
    def coerce(cls, value: Any) -> "CorsConfig":
        if isinstance(value, CorsConfig):
            return value
        if value is None:
            return cls.from_env()
        if isinstance(value, dict):
            return cls.from_dict(value)
        raise TypeError(f"cors must be a dict or CorsConfig, got {type(value).__name__}")


@dataclass
class DispatcherConfig:
    """
    Options accepted by Dispatcher.

    Attributes:
        controllers: Controller classes (required, non-empty)
        listeners: Listener classes (optional)
        cors: CORS settings; None reads CORS_* from the environment
        container: Resolver used to build handler instances; None creates a Container
    """
    controllers: List[Any] = field(default_factory=list)
    listeners: Optional[List[Any]] = None
    cors: Any = None
    container: Any = None

    @classmethod
    def from_dict(cls, options: Dict[str, Any]) -> "DispatcherConfig":
        return cls(
            controllers=options.get("controllers"),
            listeners=options.get("listeners"),
            cors=options.get("cors"),
            container=options.get("container"),
        )


def log_level() -> str:
    return _get_env("LOG_LEVEL", "INFO").upper()
