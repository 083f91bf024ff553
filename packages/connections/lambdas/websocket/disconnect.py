import logging
import os
from typing import Any

from aws_lambda_powertools.utilities.typing import LambdaContext
from relay_utils.context import RelayContext, get_context
from relay_utils.errors import RegistryError
from response_utils import create_error_response, create_websocket_response
from validators import WebSocketEvent, validate_event
from websocket_errors import DisconnectFailed, WebSocketError, create_error_body

logger = logging.getLogger()
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))


def remove_connection(relay: RelayContext, connection_id: str) -> None:
    """
    Delete the registry record for a connection. Deleting a connection that
    was never recorded (or already cleaned up) succeeds.
    """
    try:
        relay.registry.delete(connection_id)
    except RegistryError as e:
        raise DisconnectFailed(connection_id, details={"original_error": str(e)}) from e

    logger.info(f"Connection closed: {connection_id}")


def handle_disconnect(event: WebSocketEvent, relay: RelayContext) -> dict[str, Any]:
    connection_id = event.connection_id

    try:
        remove_connection(relay, connection_id)
        return create_websocket_response(200, {"message": "Disconnected"})

    except WebSocketError as e:
        logger.error(f"Error while processing disconnect event: {e}")
        return create_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error while disconnecting {connection_id}: {e}", exc_info=True)
        return create_error_response(
            DisconnectFailed(connection_id, details={"original_error": str(e)})
        )


def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle WebSocket disconnect events
    """
    try:
        validated_event = validate_event(event)
        relay = get_context()
    except WebSocketError as e:
        logger.error(f"Error while processing disconnect event: {e}")
        return create_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return create_websocket_response(500, create_error_body(e))

    return handle_disconnect(validated_event, relay)
