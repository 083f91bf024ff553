import logging
import os
from typing import Any

from aws_lambda_powertools.utilities.typing import LambdaContext
from relay_utils.context import RelayContext, get_context
from relay_utils.errors import RegistryError
from relay_utils.models import ConnectionRecord
from response_utils import create_error_response, create_websocket_response
from validators import WebSocketEvent, validate_event
from websocket_errors import ConnectFailed, WebSocketError, create_error_body

logger = logging.getLogger()
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))


def record_connection(relay: RelayContext, connection_id: str) -> ConnectionRecord:
    record = ConnectionRecord.create(connection_id, relay.now())
    try:
        relay.registry.put(record)
    except RegistryError as e:
        raise ConnectFailed(connection_id, details={"original_error": str(e)}) from e

    logger.info(f"Connection established: {connection_id} (expires at {record.expires_at})")
    return record


def handle_connect(event: WebSocketEvent, relay: RelayContext) -> dict[str, Any]:
    connection_id = event.connection_id

    try:
        record_connection(relay, connection_id)
        return create_websocket_response(200, {"message": "Connected"})

    except WebSocketError as e:
        logger.error(f"Error while processing connect event: {e}")
        return create_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error while connecting {connection_id}: {e}", exc_info=True)
        return create_error_response(
            ConnectFailed(connection_id, details={"original_error": str(e)})
        )


def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle WebSocket connect events
    """
    try:
        logger.info(f"Received connect event: {event}")
        validated_event = validate_event(event)
        relay = get_context()
    except WebSocketError as e:
        logger.error(f"Error while processing connect event: {e}")
        return create_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return create_websocket_response(500, create_error_body(e))

    return handle_connect(validated_event, relay)
