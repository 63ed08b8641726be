# =============================================================================
# Exceptions
# =============================================================================
# HttpException subclasses carry a numeric status `code` that the dispatcher
# copies into the HTTP envelope. Runtime errors describe registration and
# routing failures.
# =============================================================================

from typing import Any, Optional


class HttpException(Exception):
    """Base for errors that map to an HTTP status code."""

    default_message = "Internal Server Error"

    def __init__(self, code: int, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.code = code
        self.message = message or self.default_message


class ValidationException(HttpException):
    default_message = "Bad Request"

    def __init__(self, message: Optional[str] = None):
        super().__init__(400, message)


class UnauthorizedException(HttpException):
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None):
        super().__init__(401, message)


class ForbiddenException(HttpException):
    default_message = "Forbidden"

    def __init__(self, message: Optional[str] = None):
        super().__init__(403, message)


class ResourceNotFoundException(HttpException):
    default_message = "Not Found"

    def __init__(self, message: Optional[str] = None):
        super().__init__(404, message)


class ConflictException(HttpException):
    default_message = "Conflict"

    def __init__(self, message: Optional[str] = None):
        super().__init__(409, message)


class UnprocessableEntityException(HttpException):
    default_message = "Unprocessable Entity"

    def __init__(self, message: Optional[str] = None):
        super().__init__(422, message)


class TooManyRequestsException(HttpException):
    default_message = "Too Many Requests"

    def __init__(self, message: Optional[str] = None):
        super().__init__(429, message)


class InternalServerErrorException(HttpException):
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(500, message)


class BadGatewayException(HttpException):
    default_message = "Bad Gateway"

    def __init__(self, message: Optional[str] = None):
        super().__init__(502, message)


class ServiceUnavailableException(HttpException):
    default_message = "Service Unavailable"

    def __init__(self, message: Optional[str] = None):
        super().__init__(503, message)


# =============================================================================
# RUNTIME ERRORS
# =============================================================================

class RuntimeConfigurationError(ValueError):
    """Invalid controller/listener setup. Raised at registration time."""


class RoutingError(Exception):
    """No route or listener matched the event."""

    code = 404


class ResolutionError(Exception):
    """The resolver could not produce a usable handler instance."""

    code = 500


def status_code_for(exc: BaseException, default: int = 500) -> int:
    """Status code carried by an exception, or `default`."""
    code: Any = getattr(exc, "code", None)
    if isinstance(code, int) and not isinstance(code, bool) and 100 <= code <= 599:
        return code
    return default
