import logging
import os

from relay_utils.clients import (
    ConnectionRegistry,
    Delivered,
    DeliveryFailed,
    PushChannel,
    TargetGone,
)
from relay_utils.errors import MessageDeliveryError, RegistryError
from relay_utils.models import OutboundMessage

logger = logging.getLogger(__name__)
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))


def push_to(
    channel: PushChannel,
    registry: ConnectionRegistry,
    connection_id: str,
    endpoint: str,
    message: OutboundMessage,
) -> None:
    """
    Push one message to a connection.

    If the gateway reports the connection as gone, its registry record is
    removed and the push counts as handled. Any other delivery failure raises
    MessageDeliveryError.
    """
    logger.info(f"Sending {message.type} message to connection {connection_id}")

    match channel.push(connection_id, endpoint, message.to_json()):
        case Delivered():
            logger.info(f"Message sent successfully to connection {connection_id}")
        case TargetGone():
            logger.info(f"Connection {connection_id} is gone, removing from registry")
            try:
                registry.delete(connection_id)
            except RegistryError as e:
                logger.error(f"Failed to remove stale connection {connection_id}: {e}")
        case DeliveryFailed(reason=reason, status_code=status_code):
            logger.error(f"Failed to send message to connection {connection_id}: {reason}")
            raise MessageDeliveryError(
                connection_id, reason, details={"status_code": status_code}
            )
