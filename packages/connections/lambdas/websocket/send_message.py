import logging
import os
from typing import Any

from aws_lambda_powertools.utilities.typing import LambdaContext
from relay_utils.context import RelayContext, get_context
from relay_utils.errors import MessageDeliveryError
from relay_utils.models import OutboundMessage
from response_utils import create_error_response, create_websocket_response
from validators import WebSocketEvent, parse_message_body, validate_event
from websocket_errors import WebSocketError, create_error_body

logger = logging.getLogger()
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))


def handle_send_message(event: WebSocketEvent, relay: RelayContext) -> dict[str, Any]:
    """
    Echo the sender's message back to them. Only the sending connection
    receives the echo.
    """
    connection_id = event.connection_id

    try:
        message = parse_message_body(event)
        logger.info(f"Message from {connection_id}: {message.to_payload()}")

        relay.push(
            connection_id,
            event.callback_endpoint,
            OutboundMessage(type="message", message="Message received", data=message.to_payload()),
        )
        return create_websocket_response(200)

    except MessageDeliveryError as e:
        logger.error(f"Error in sendMessage handler: {e}")
        return create_websocket_response(500)
    except Exception as e:
        logger.error(f"Unexpected error in sendMessage handler: {e}", exc_info=True)
        return create_websocket_response(500)


def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle the sendMessage route
    """
    try:
        validated_event = validate_event(event)
        relay = get_context()
    except WebSocketError as e:
        logger.error(f"Error while processing sendMessage event: {e}")
        return create_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error while processing sendMessage event: {e}", exc_info=True)
        return create_websocket_response(500, create_error_body(e))

    return handle_send_message(validated_event, relay)
