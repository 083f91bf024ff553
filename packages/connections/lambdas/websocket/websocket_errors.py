from abc import abstractmethod
from typing import Any


class WebSocketError(Exception):
    """Base exception class for errors that occur while handling a WebSocket event."""

    def __init__(
        self,
        log_message: str | None = None,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(log_message)
        self.log_message = log_message
        self.status_code = status_code
        self.error_code = self.__class__.__name__
        self.details = details

    @abstractmethod
    def to_response(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        """Define how the error's displayed to the user."""
        pass


class ValidationError(WebSocketError):
    """
    Raised when the event handed to a handler by API Gateway is malformed.
    """

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__(status_code=500, details=details)

    def to_response(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        """Convert error to response body."""
        response = {"error": "A server error occurred while processing a WebSocket request."}
        if extra:
            response.update(extra)
        return response


class ConnectFailed(WebSocketError):
    """
    Raised when a new connection cannot be recorded.
    """

    def __init__(self, connection_id: str, details: dict[str, Any] | None = None):
        super().__init__(
            log_message=f"Failed to record connection {connection_id}",
            status_code=500,
            details=details,
        )
        self.connection_id = connection_id

    def to_response(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        response = {"error": "Failed to connect"}
        if extra:
            response.update(extra)
        return response


class DisconnectFailed(WebSocketError):
    """
    Raised when a closed connection cannot be removed.
    """

    def __init__(self, connection_id: str, details: dict[str, Any] | None = None):
        super().__init__(
            log_message=f"Failed to remove connection {connection_id}",
            status_code=500,
            details=details,
        )
        self.connection_id = connection_id

    def to_response(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        response = {"error": "Failed to disconnect"}
        if extra:
            response.update(extra)
        return response


class UnexpectedError(WebSocketError):
    """
    Raised when an unexpected error occurs while processing a WebSocket request.
    """

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__(status_code=500, details=details)

    def to_response(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        """Convert error to response body."""
        response = {"error": "A server error occurred while processing a WebSocket request."}
        if extra:
            response.update(extra)
        return response


def create_error_body(error: Exception) -> dict[str, Any]:
    """
    Create a response from any Exception.
    """
    if isinstance(error, WebSocketError):
        return error.to_response()

    unexpected_error = UnexpectedError(
        details={"original_error": str(error)},
    )

    return unexpected_error.to_response()
