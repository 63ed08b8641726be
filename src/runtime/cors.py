# =============================================================================
# CORS Headers
# =============================================================================

from typing import Any, Dict, Optional

from src.runtime.config import CorsConfig


def get_origin(event: Any) -> Optional[str]:
    """Caller origin from request headers (case-insensitive)."""
    if not isinstance(event, dict):
        return None
    headers = event.get("headers") or {}
    if not isinstance(headers, dict):
        return None
    for name, value in headers.items():
        if isinstance(name, str) and name.lower() == "origin":
            return value
    return None


def resolve_allowed_origin(config: CorsConfig, origin: Optional[str]) -> Optional[str]:
    """
    Pick the Access-Control-Allow-Origin value.

    Echo the caller's origin when listed, else "*" when listed, else the
    first configured origin.
    """
    origins = config.allow_origins
    if not origins:
        return None
    if origin and origin in origins:
        return origin
    if "*" in origins:
        return "*"
    return origins[0]


def cors_headers(config: Optional[CorsConfig], origin: Optional[str] = None) -> Dict[str, str]:
    """Headers for one response; empty when CORS is disabled."""
    if config is None or not config.enabled:
        return {}

    headers: Dict[str, str] = {}

    allowed = resolve_allowed_origin(config, origin)
    if allowed:
        headers["Access-Control-Allow-Origin"] = allowed
        if allowed != "*":
            headers["Vary"] = "Origin"
    if config.allow_methods:
        headers["Access-Control-Allow-Methods"] = ", ".join(config.allow_methods)
    if config.allow_headers:
        headers["Access-Control-Allow-Headers"] = ", ".join(config.allow_headers)
    if config.expose_headers:
        headers["Access-Control-Expose-Headers"] = ", ".join(config.expose_headers)
    if config.credentials:
        headers["Access-Control-Allow-Credentials"] = "true"
    if config.max_age is not None:
        headers["Access-Control-Max-Age"] = str(config.max_age)

    return headers
