import logging
import os
from typing import Any

from aws_lambda_powertools.utilities.typing import LambdaContext
from relay_utils.context import RelayContext, get_context
from relay_utils.models import OutboundMessage
from response_utils import create_error_response, create_websocket_response
from validators import WebSocketEvent, parse_message_body, validate_event
from websocket_errors import WebSocketError, create_error_body

logger = logging.getLogger()
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))

UNKNOWN_ACTION_MESSAGE = 'Unknown action. Use "sendMessage" action.'


def handle_default(event: WebSocketEvent, relay: RelayContext) -> dict[str, Any]:
    """
    Tell the sender their action wasn't recognized.
    """
    connection_id = event.connection_id

    try:
        message = parse_message_body(event)
        logger.info(f"Default message from {connection_id}: action={message.action!r}")

        relay.push(
            connection_id,
            event.callback_endpoint,
            OutboundMessage(type="error", message=UNKNOWN_ACTION_MESSAGE),
        )
        return create_websocket_response(200)

    except Exception as e:
        logger.error(f"Error in default handler: {e}", exc_info=True)
        return create_websocket_response(500)


def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Default WebSocket message handler for unrecognized routes
    """
    try:
        validated_event = validate_event(event)
        relay = get_context()
    except WebSocketError as e:
        logger.error(f"Error while processing message event: {e}")
        return create_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error while processing message event: {e}", exc_info=True)
        return create_websocket_response(500, create_error_body(e))

    return handle_default(validated_event, relay)
