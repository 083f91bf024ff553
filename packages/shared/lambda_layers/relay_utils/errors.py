from typing import Any


class RelayError(Exception):
    """Base exception class for failures of the relay's external dependencies."""

    def __init__(
        self,
        log_message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(log_message)
        self.log_message = log_message
        self.error_code = self.__class__.__name__
        self.details = details


class RegistryError(RelayError):
    """Raised when a connection registry operation fails."""

    def __init__(self, operation: str, connection_id: str, details: dict[str, Any] | None = None):
        self.operation = operation
        self.connection_id = connection_id
        super().__init__(
            log_message=f"Registry {operation} failed for connection {connection_id}",
            details=details,
        )


class ObjectStoreError(RelayError):
    """Raised when writing an uploaded object fails."""

    def __init__(self, key: str, details: dict[str, Any] | None = None):
        self.key = key
        original = (details or {}).get("original_error")
        super().__init__(
            log_message=original or f"Failed to store object {key}",
            details=details,
        )


class InvalidPayloadError(RelayError):
    """Raised when an upload's data field is not valid base64."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__(log_message="Data field is not valid base64", details=details)


class MessageDeliveryError(RelayError):
    """Raised when a push fails for any reason other than the connection being gone."""

    def __init__(self, connection_id: str, reason: str, details: dict[str, Any] | None = None):
        self.connection_id = connection_id
        self.reason = reason
        super().__init__(
            log_message=f"Failed to deliver message to connection {connection_id}: {reason}",
            details=details,
        )
