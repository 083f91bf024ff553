import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

CONNECTION_TTL_SECONDS = 24 * 60 * 60
DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_FILE_NAME = "upload"


def to_camel_case(string: str) -> str:
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class CamelCaseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel_case, populate_by_name=True)


class ConnectionRecord(CamelCaseModel):
    """
    One entry per open WebSocket connection. The registry's TTL attribute
    holds `expires_at`, so stale entries are collected even if no
    disconnect event ever arrives.
    """

    connection_id: str
    connected_at: int
    expires_at: int

    @classmethod
    def create(cls, connection_id: str, now: int) -> "ConnectionRecord":
        return cls(
            connection_id=connection_id,
            connected_at=now,
            expires_at=now + CONNECTION_TTL_SECONDS,
        )

    def to_item(self) -> dict[str, dict[str, str]]:
        """Serialize to a DynamoDB item."""
        return {
            "connectionId": {"S": self.connection_id},
            "connectedAt": {"N": str(self.connected_at)},
            "ttl": {"N": str(self.expires_at)},
        }


class InboundMessage(BaseModel):
    """
    A JSON message sent by a client. The known fields are read best-effort:
    a field of the wrong type reads as absent without affecting the others.
    Anything else the client sends is kept in `model_extra`, and the body as
    received is kept for echoing back.
    """

    action: str | None = None
    data: Any = None
    file_name: str | None = None
    content_type: str | None = None

    model_config = ConfigDict(alias_generator=to_camel_case, extra="allow")

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("action", "file_name", "content_type", mode="before")
    @classmethod
    def text_or_none(cls, value: Any) -> str | None:
        if isinstance(value, str):
            return value
        # Numbers are stringified the way a JS template literal would
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return None

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "InboundMessage":
        message = cls.model_validate(body)
        message._raw = dict(body)
        return message

    def to_payload(self) -> dict[str, Any]:
        """Return the message exactly as the client sent it."""
        return dict(self._raw)


class OutboundMessage(BaseModel):
    """
    A message pushed to a client over its WebSocket connection.
    """

    type: Literal["error", "message", "upload-success", "upload-error"] = Field(
        description="Discriminator the client switches on."
    )
    message: str | None = None
    data: Any = None
    error: str | None = None

    def to_json(self) -> str:
        body = {key: value for key, value in self.model_dump().items() if value is not None}
        return json.dumps(body)


class UploadResult(CamelCaseModel):
    object_key: str
    bucket: str


def build_object_key(connection_id: str, epoch_millis: int, file_name: str | None = None) -> str:
    """Key under which an upload is stored: `{connectionId}/{epochMillis}-{fileName}`."""
    return f"{connection_id}/{epoch_millis}-{file_name or DEFAULT_FILE_NAME}"
