import logging
import os
from collections.abc import Callable
from typing import Any

from aws_lambda_powertools.utilities.typing import LambdaContext
from connect import handle_connect
from default import handle_default
from disconnect import handle_disconnect
from relay_utils.context import RelayContext, get_context
from response_utils import create_error_response, create_websocket_response
from send_message import handle_send_message
from upload import handle_upload
from validators import WebSocketEvent, parse_message_body, validate_event
from websocket_errors import WebSocketError, create_error_body

logger = logging.getLogger()
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))

CONNECT_ROUTE = "$connect"
DISCONNECT_ROUTE = "$disconnect"
DEFAULT_ROUTE = "$default"

ROUTES: dict[str, Callable[[WebSocketEvent, RelayContext], dict[str, Any]]] = {
    CONNECT_ROUTE: handle_connect,
    DISCONNECT_ROUTE: handle_disconnect,
    DEFAULT_ROUTE: handle_default,
    "sendMessage": handle_send_message,
    "upload": handle_upload,
}

MESSAGE_ROUTES = ("sendMessage", "upload")


def resolve_route(event: WebSocketEvent) -> str:
    """
    Pick the route for an event: lifecycle events first, then the gateway's
    route key, then the `action` field of the body. Anything else goes to
    the default route.
    """
    request_context = event.requestContext

    if request_context.eventType == "CONNECT" or request_context.routeKey == CONNECT_ROUTE:
        return CONNECT_ROUTE
    if request_context.eventType == "DISCONNECT" or request_context.routeKey == DISCONNECT_ROUTE:
        return DISCONNECT_ROUTE
    if request_context.routeKey in MESSAGE_ROUTES:
        return request_context.routeKey

    action = parse_message_body(event).action
    if action in MESSAGE_ROUTES:
        return action

    return DEFAULT_ROUTE


def dispatch(event: WebSocketEvent, relay: RelayContext) -> dict[str, Any]:
    route = resolve_route(event)
    logger.info(f"Routing event from {event.connection_id} to {route}")
    return ROUTES[route](event, relay)


def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Single entry point for every route of the WebSocket API.
    """
    try:
        validated_event = validate_event(event)
        relay = get_context()
    except WebSocketError as e:
        logger.error(f"Error while routing WebSocket event: {e}")
        return create_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error while routing WebSocket event: {e}", exc_info=True)
        return create_websocket_response(500, create_error_body(e))

    try:
        return dispatch(validated_event, relay)
    except Exception as e:
        logger.error(f"Unexpected error while dispatching WebSocket event: {e}", exc_info=True)
        return create_websocket_response(500, create_error_body(e))
