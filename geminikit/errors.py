"""Exceptions raised by the Gemini client."""

from __future__ import annotations

import json
from typing import Any

RATE_LIMIT_STATUS = 429
RATE_LIMIT_DEFAULT_DELAY = 60.0
SERVER_ERROR_DELAY = 5.0


def _is_server_error(status: int) -> bool:
    return 500 <= status <= 599


class GeminiError(Exception):
    """Base class for every error raised by the package."""

    def is_retryable(self) -> bool:
        """Whether repeating the failed operation may succeed."""
        return False

    def retry_delay(self) -> float | None:
        """Suggested delay in seconds before retrying, if the error implies one."""
        return None


class _DetailError(GeminiError):
    """An error carrying a single detail message behind a fixed prefix."""

    prefix = "Error"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class HttpError(_DetailError):
    """The HTTP request itself failed."""

    prefix = "HTTP request failed"

    def is_retryable(self) -> bool:
        return True


class JsonError(_DetailError, ValueError):
    """A payload could not be serialized or deserialized."""

    prefix = "JSON serialization/deserialization failed"


class ConfigError(_DetailError):
    """The client configuration is invalid."""

    prefix = "Invalid configuration"


class SchemaValidationError(_DetailError):
    """A schema failed validation."""

    prefix = "Schema validation failed"


class FunctionCallError(_DetailError):
    """A function call failed."""

    prefix = "Function call failed"


class GroundingError(_DetailError):
    """A grounding operation failed."""

    prefix = "Grounding failed"


class CacheError(_DetailError):
    """A cache operation failed."""

    prefix = "Cache operation failed"


class StreamingError(_DetailError):
    """A streaming operation failed."""

    prefix = "Streaming error"


class InvalidResponseError(_DetailError):
    """The response had an unexpected shape."""

    prefix = "Invalid response format"


class ApiError(GeminiError):
    """The API answered with an error status."""

    def __init__(self, status: int, message: str, details: Any = None) -> None:
        self.status = status
        self.message = message
        self.details = details
        super().__init__(f"API error (status: {status}): {message}")

    def is_retryable(self) -> bool:
        return _is_server_error(self.status)

    def retry_delay(self) -> float | None:
        if self.status == RATE_LIMIT_STATUS:
            return RATE_LIMIT_DEFAULT_DELAY
        if _is_server_error(self.status):
            return SERVER_ERROR_DELAY
        return None


class RateLimitError(GeminiError):
    """The API rate limit was exceeded."""

    def __init__(self, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        suffix = f"{retry_after}s" if retry_after is not None else "an unspecified delay"
        super().__init__(f"Rate limit exceeded. Retry after {suffix}")

    def is_retryable(self) -> bool:
        return True

    def retry_delay(self) -> float | None:
        return self.retry_after


class GeminiTimeoutError(GeminiError):
    """An operation did not finish in time."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Timeout after {timeout}s")

    def is_retryable(self) -> bool:
        return True


class ThinkingBudgetExceededError(GeminiError):
    """The model used up its thinking budget."""

    def __init__(self) -> None:
        super().__init__("Thinking budget exceeded")


def api_error_from_response(status: int, body: str) -> GeminiError:
    """Build the error matching an unsuccessful API response."""
    try:
        details = json.loads(body)
    except (TypeError, ValueError):
        details = None

    if status == RATE_LIMIT_STATUS:
        retry_after = None
        if isinstance(details, dict):
            value = details.get("retryAfter")
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                retry_after = float(value)
        return RateLimitError(retry_after)

    message = body
    if isinstance(details, dict):
        error = details.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            message = error["message"]
    return ApiError(status, message, details)