"""Application exception classes and handlers."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Authentication (401) ---


class AuthenticationError(AppException):
    """Base authentication error."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message=message, code="AUTHENTICATION_ERROR", status_code=401)


class TokenExpiredError(AppException):
    """Token has expired."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has expired",
            code="TOKEN_EXPIRED",
            status_code=401,
        )


class TokenBlacklistedError(AppException):
    """Token has been revoked."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has been revoked",
            code="TOKEN_BLACKLISTED",
            status_code=401,
        )


class InvalidTokenError(AppException):
    """Token is invalid."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid token",
            code="INVALID_TOKEN",
            status_code=401,
        )


class InvalidCredentialsError(AppException):
    """Invalid email or password."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


# --- Authorization (403) ---


class AuthorizationError(AppException):
    """Insufficient permissions."""

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message=message, code="AUTHORIZATION_ERROR", status_code=403)


class AccountSuspendedError(AppException):
    """Account suspended by an administrator."""

    def __init__(self) -> None:
        super().__init__(
            message="Account is suspended",
            code="ACCOUNT_SUSPENDED",
            status_code=403,
        )


# --- Conflict (409) ---


class UserAlreadyExistsError(AppException):
    """User with this email already exists."""

    def __init__(self) -> None:
        super().__init__(
            message="User with this email already exists",
            code="USER_ALREADY_EXISTS",
            status_code=409,
        )


class CourseSlugTakenError(AppException):
    """Another course already uses this slug."""

    def __init__(self) -> None:
        super().__init__(
            message="A course with this slug already exists",
            code="COURSE_SLUG_TAKEN",
            status_code=409,
        )


# --- Not Found (404) ---


class UserNotFoundError(AppException):
    """User not found."""

    def __init__(self) -> None:
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            status_code=404,
        )


class SessionNotFoundError(AppException):
    """Chat session not found."""

    def __init__(self) -> None:
        super().__init__(
            message="Chat session not found",
            code="SESSION_NOT_FOUND",
            status_code=404,
        )


class CourseNotFoundError(AppException):
    """Course not found."""

    def __init__(self) -> None:
        super().__init__(
            message="Course not found",
            code="COURSE_NOT_FOUND",
            status_code=404,
        )


class ImageNotFoundError(AppException):
    """Generated image not found."""

    def __init__(self) -> None:
        super().__init__(
            message="Image not found",
            code="IMAGE_NOT_FOUND",
            status_code=404,
        )


# --- Rate Limit (429) ---


class AccountLockedError(AppException):
    """Too many failed login attempts."""

    def __init__(self) -> None:
        super().__init__(
            message="Too many failed login attempts. Please try again later.",
            code="ACCOUNT_LOCKED",
            status_code=429,
        )


# --- Chat relay / AI gateway ---
# These travel to the browser as {"error": message}, the format the chat
# and image clients read.


class ChatRelayError(AppException):
    """Base error for the chat relay and the AI gateway."""


class ChatRequestError(ChatRelayError):
    """Malformed relay request, rejected before any upstream work."""

    def __init__(self, message: str = "Messages array is required") -> None:
        super().__init__(message=message, code="BAD_REQUEST", status_code=400)


class GatewayUnconfiguredError(ChatRelayError):
    """No gateway credential configured."""

    def __init__(self) -> None:
        super().__init__(
            message="AI service is not configured",
            code="AI_UNCONFIGURED",
            status_code=500,
        )


class GatewayRateLimitedError(ChatRelayError):
    """Upstream answered 429; the caller may retry later."""

    def __init__(self) -> None:
        super().__init__(
            message="Rate limit exceeded. Please wait a moment and try again.",
            code="AI_RATE_LIMITED",
            status_code=429,
        )


class GatewayQuotaExceededError(ChatRelayError):
    """Upstream answered 402; not retryable for the current billing period."""

    def __init__(self) -> None:
        super().__init__(
            message="AI service quota exceeded. Please try again later.",
            code="AI_QUOTA_EXCEEDED",
            status_code=402,
        )


class GatewayUpstreamError(ChatRelayError):
    """Any other upstream failure. Upstream details are never exposed."""

    def __init__(self, message: str = "Failed to get AI response") -> None:
        super().__init__(message=message, code="AI_UPSTREAM_FAILURE", status_code=500)


# --- Exception Handlers ---


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": exc.code,
                "message": exc.message,
            },
        },
    )


async def chat_relay_exception_handler(
    request: Request, exc: ChatRelayError
) -> JSONResponse:
    """Render relay and gateway errors as ``{"error": message}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers={"Cache-Control": "no-cache"},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Flatten pydantic validation errors into the common error envelope."""
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": details,
            },
        },
    )
