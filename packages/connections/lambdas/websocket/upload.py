import base64
import logging
import os
from typing import Any

from aws_lambda_powertools.utilities.typing import LambdaContext
from relay_utils.context import RelayContext, get_context
from relay_utils.errors import InvalidPayloadError
from relay_utils.models import (
    DEFAULT_CONTENT_TYPE,
    InboundMessage,
    OutboundMessage,
    UploadResult,
    build_object_key,
)
from response_utils import create_error_response, create_websocket_response
from validators import WebSocketEvent, parse_message_body, validate_event
from websocket_errors import WebSocketError, create_error_body

logger = logging.getLogger()
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))


def decode_payload(data: Any) -> bytes:
    if not isinstance(data, str):
        raise InvalidPayloadError(details={"data_type": type(data).__name__})
    # Unpadded input is accepted, as Node's Buffer.from(data, "base64") does
    data = "".join(data.split())
    data += "=" * (-len(data) % 4)
    try:
        return base64.b64decode(data)
    except ValueError as e:
        raise InvalidPayloadError(details={"original_error": str(e)}) from e


def store_upload(relay: RelayContext, connection_id: str, message: InboundMessage) -> UploadResult:
    """
    Decode an upload and write it to the object store under a key unique to
    the connection and the current millisecond.
    """
    object_key = build_object_key(connection_id, relay.now_millis(), message.file_name)
    body = decode_payload(message.data)

    relay.store.put_object(object_key, body, message.content_type or DEFAULT_CONTENT_TYPE)
    logger.info(f"Uploaded to bucket {relay.store.bucket}: {object_key} ({len(body)} bytes)")

    return UploadResult(object_key=object_key, bucket=relay.store.bucket)


def handle_upload(event: WebSocketEvent, relay: RelayContext) -> dict[str, Any]:
    connection_id = event.connection_id
    endpoint = event.callback_endpoint

    try:
        message = parse_message_body(event)
        data_length = len(message.data) if isinstance(message.data, str) else None
        logger.info(
            f"Upload request from {connection_id}: fileName={message.file_name}, "
            f"contentType={message.content_type}, dataLength={data_length}"
        )

        if not message.data:
            relay.push(
                connection_id,
                endpoint,
                OutboundMessage(
                    type="upload-error",
                    message="No data provided",
                    error="Data field is required",
                ),
            )
            return create_websocket_response(400)

        try:
            result = store_upload(relay, connection_id, message)
        except Exception as e:
            logger.error(f"Error uploading file: {e}")
            relay.push(
                connection_id,
                endpoint,
                OutboundMessage(type="upload-error", message="Failed to upload file", error=str(e)),
            )
            return create_websocket_response(500)

        relay.push(
            connection_id,
            endpoint,
            OutboundMessage(
                type="upload-success",
                message="File uploaded successfully",
                data=result.model_dump(by_alias=True),
            ),
        )
        return create_websocket_response(200)

    except Exception as e:
        logger.error(f"Error in upload handler: {e}", exc_info=True)
        return create_websocket_response(500)


def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle the upload route
    """
    try:
        validated_event = validate_event(event)
        relay = get_context()
    except WebSocketError as e:
        logger.error(f"Error while processing upload event: {e}")
        return create_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error while processing upload event: {e}", exc_info=True)
        return create_websocket_response(500, create_error_body(e))

    return handle_upload(validated_event, relay)
