import base64
import json
import logging
import os
from typing import Any, Literal

import pydantic
from pydantic import BaseModel, ConfigDict
from relay_utils.models import InboundMessage
from websocket_errors import ValidationError

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))


class RequestContext(BaseModel):
    connectionId: str
    domainName: str
    stage: str
    routeKey: str | None = None
    eventType: Literal["CONNECT", "DISCONNECT", "MESSAGE"] | None = None
    apiId: str | None = None

    model_config = ConfigDict(extra="ignore")


class WebSocketEvent(BaseModel):
    """An API Gateway WebSocket event, for any route."""

    requestContext: RequestContext
    body: str | None = None
    isBase64Encoded: bool = False

    model_config = ConfigDict(extra="ignore")

    @property
    def connection_id(self) -> str:
        return self.requestContext.connectionId

    @property
    def callback_endpoint(self) -> str:
        """Management API endpoint for pushing to connections of this API stage."""
        return f"https://{self.requestContext.domainName}/{self.requestContext.stage}"


def validate_event(event: dict[str, Any]) -> WebSocketEvent:
    """Validate a websocket event"""
    try:
        return WebSocketEvent.model_validate(event)
    except pydantic.ValidationError as e:
        logger.error(f"WebSocket event validation failed: {str(e)}")
        raise ValidationError(details={"validation_error": str(e)}) from e


def parse_message_body(event: WebSocketEvent) -> InboundMessage:
    """
    Parse the body of a message event. Anything that isn't a JSON object
    is treated as an empty message.
    """
    raw = event.body or "{}"

    try:
        if event.isBase64Encoded:
            raw = base64.b64decode(raw).decode("utf-8")
        body = json.loads(raw)
    except ValueError as e:
        logger.warning(f"Ignoring unparseable body from {event.connection_id}: {e}")
        body = {}

    if not isinstance(body, dict):
        logger.warning(f"Ignoring non-object body from {event.connection_id}")
        body = {}

    return InboundMessage.from_body(body)
