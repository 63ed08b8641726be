# =============================================================================
# Response - Explicit Handler Responses and Result Normalization
# =============================================================================
# Handlers may return:
# - a plain value (dict, list, str, number) -> wrapped by the dispatcher
# - None -> 204 (HTTP) or {"success": True, ..., "body": None} (listener)
# - a Response -> status/headers/body used as declared
#
# In listener mode a Response with only a body set is returned unwrapped
# (Bedrock agent actions, Cognito triggers and authorizers expect a bare
# object). Any header or non-200 status makes it HTTP-shaped instead.
# =============================================================================

import json
from typing import Any, Dict, Iterable, Optional

JSON_CONTENT_TYPE = "application/json"


def jdump(x: Any) -> str:
    """JSON dump with defaults for non-serializable types."""
    return json.dumps(x, ensure_ascii=False, default=str)


class Response:
    """Fluent builder for an explicit handler response."""

    def __init__(self, body: Any = None):
        self._status_code = 200
        self._headers: Dict[str, str] = {}
        self._body = body
        self._is_base64_encoded = False

    def __repr__(self) -> str:
        return f"Response(status={self._status_code}, headers={self._headers!r})"

    # ==========================================================================
    # Builders
    # ==========================================================================

    def status(self, code: int) -> "Response":
        self._status_code = code
        return self

    def header(self, name: str, value: str) -> "Response":
        self._headers[name] = value
        return self

    def set_headers(self, headers: Dict[str, str]) -> "Response":
        self._headers.update(headers)
        return self

    def json(self, data: Any) -> "Response":
        self._body = data
        return self.header("Content-Type", JSON_CONTENT_TYPE)

    def text(self, data: str) -> "Response":
        self._body = data
        return self.header("Content-Type", "text/plain")

    def html(self, data: str) -> "Response":
        self._body = data
        return self.header("Content-Type", "text/html")

    def base64(self, encoded: bool = True) -> "Response":
        self._is_base64_encoded = encoded
        return self

    def binary(self, data: str, content_type: str) -> "Response":
        """Body is base64 text of a binary payload."""
        self._body = data
        self._is_base64_encoded = True
        return self.header("Content-Type", content_type)

    def cors(
        self,
        origins: Iterable[str] = ("*",),
        methods: Iterable[str] = ("GET", "POST", "PUT", "DELETE", "PATCH"),
    ) -> "Response":
        return (
            self.header("Access-Control-Allow-Origin", ", ".join(origins))
            .header("Access-Control-Allow-Methods", ", ".join(methods))
            .header("Access-Control-Allow-Headers", "Content-Type, Authorization")
        )

    def cache(self, seconds: int) -> "Response":
        return self.header("Cache-Control", f"max-age={seconds}")

    def no_cache(self) -> "Response":
        return self.header("Cache-Control", "no-cache, no-store, must-revalidate")

    # ==========================================================================
    # Shortcuts
    # ==========================================================================

    @classmethod
    def ok(cls, data: Any = None) -> "Response":
        return cls(data).status(200)

    @classmethod
    def created(cls, data: Any = None) -> "Response":
        return cls(data).status(201)

    @classmethod
    def accepted(cls, data: Any = None) -> "Response":
        return cls(data).status(202)

    @classmethod
    def no_content(cls) -> "Response":
        return cls().status(204)

    @classmethod
    def bad_request(cls, message: Optional[str] = None) -> "Response":
        return cls({"message": message or "Bad Request"}).status(400)

    @classmethod
    def unauthorized(cls, message: Optional[str] = None) -> "Response":
        return cls({"message": message or "Unauthorized"}).status(401)

    @classmethod
    def forbidden(cls, message: Optional[str] = None) -> "Response":
        return cls({"message": message or "Forbidden"}).status(403)

    @classmethod
    def not_found(cls, message: Optional[str] = None) -> "Response":
        return cls({"message": message or "Not Found"}).status(404)

    @classmethod
    def conflict(cls, message: Optional[str] = None) -> "Response":
        return cls({"message": message or "Conflict"}).status(409)

    @classmethod
    def internal_server_error(cls, message: Optional[str] = None) -> "Response":
        return cls({"message": message or "Internal Server Error"}).status(500)

    @classmethod
    def pdf(cls, base64_data: str) -> "Response":
        return cls().binary(base64_data, "application/pdf")

    @classmethod
    def image(cls, base64_data: str, image_type: str = "png") -> "Response":
        mime_type = "jpeg" if image_type == "jpg" else image_type
        return cls().binary(base64_data, f"image/{mime_type}")

    @classmethod
    def file(cls, base64_data: str, content_type: str, filename: Optional[str] = None) -> "Response":
        response = cls().binary(base64_data, content_type)
        if filename:
            response.header("Content-Disposition", f'attachment; filename="{filename}"')
        return response

    # ==========================================================================
    # Accessors
    # ==========================================================================

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    @property
    def body(self) -> Any:
        return self._body

    @property
    def is_base64_encoded(self) -> bool:
        return self._is_base64_encoded

    @property
    def has_overrides(self) -> bool:
        """True when any header or a non-200 status was set."""
        return bool(self._headers) or self._status_code != 200

    def to_object(self) -> Any:
        """Raw body, for triggers that expect a bare object."""
        return self._body

    def to_response(self) -> Dict[str, Any]:
        """API Gateway proxy response."""
        headers = dict(self._headers)

        if self._body is None:
            body = ""
        elif isinstance(self._body, str):
            body = self._body
        else:
            body = jdump(self._body)
            headers.setdefault("Content-Type", JSON_CONTENT_TYPE)

        response: Dict[str, Any] = {
            "statusCode": self._status_code,
            "headers": headers,
            "body": body,
        }
        if self._is_base64_encoded:
            response["isBase64Encoded"] = True
        return response


# =============================================================================
# NORMALIZATION
# =============================================================================

def normalize_http(result: Any) -> Dict[str, Any]:
    """Map a controller return value to an HTTP envelope."""
    if isinstance(result, Response):
        return result.to_response()

    if result is None:
        return {"statusCode": 204, "headers": {}, "body": ""}

    return {
        "statusCode": 200,
        "headers": {"Content-Type": JSON_CONTENT_TYPE},
        "body": jdump(result),
    }


def normalize_listener(result: Any, match_type: str) -> Any:
    """Map a listener return value to the listener envelope."""
    if isinstance(result, Response):
        if result.has_overrides:
            return result.to_response()
        return result.to_object()

    return {
        "success": True,
        "matchType": match_type,
        "body": result,
    }
