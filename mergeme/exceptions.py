"""mergeme exception classes."""

from typing import Any


class MergeMeError(Exception):
    """Base exception for all mergeme errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(MergeMeError):
    """Raised when action inputs are invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(MergeMeError):
    """Raised when the token is rejected."""

    pass


class AuthorizationError(MergeMeError):
    """Raised when access is denied."""

    pass


class NotFoundError(MergeMeError):
    """Raised when a resource is not found."""

    pass


class RateLimitedError(MergeMeError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(MergeMeError):
    """Raised on client errors not covered by a more specific class."""

    pass


class ServerError(MergeMeError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class GraphQLError(MergeMeError):
    """Raised when a GraphQL response carries an ``errors`` array.

    The message joins every error message returned by the API so callers can
    match on substrings such as ``"Base branch was modified."``.
    """

    def __init__(
        self,
        errors: list[dict[str, Any]],
        request_id: str | None = None,
    ) -> None:
        self.errors = errors
        messages = [
            str(error.get("message", "Unknown GraphQL error")) for error in errors
        ]
        code = str(errors[0].get("type", "GRAPHQL_ERROR")) if errors else "GRAPHQL_ERROR"
        super().__init__(code, " ".join(messages), request_id)


class PageShapeError(MergeMeError):
    """Raised when a paginated response lacks the expected page structure."""

    def __init__(self, message: str) -> None:
        super().__init__("PAGE_SHAPE_ERROR", message)
