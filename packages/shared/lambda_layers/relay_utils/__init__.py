"""
Shared utilities for the WebSocket relay: configuration, wire models,
registry/store/push clients and push delivery.
"""

from .clients import (
    ApiGatewayPushChannel,
    ConnectionRegistry,
    Delivered,
    DeliveryFailed,
    DynamoConnectionRegistry,
    ObjectStore,
    PushChannel,
    PushResult,
    S3ObjectStore,
    TargetGone,
)
from .config import RelayConfig, get_config
from .context import RelayContext, build_context, get_context
from .errors import (
    InvalidPayloadError,
    MessageDeliveryError,
    ObjectStoreError,
    RegistryError,
    RelayError,
)
from .models import ConnectionRecord, InboundMessage, OutboundMessage, build_object_key
from .push import push_to

__all__ = [
    "ApiGatewayPushChannel",
    "ConnectionRecord",
    "ConnectionRegistry",
    "Delivered",
    "DeliveryFailed",
    "DynamoConnectionRegistry",
    "InboundMessage",
    "InvalidPayloadError",
    "MessageDeliveryError",
    "ObjectStore",
    "ObjectStoreError",
    "OutboundMessage",
    "PushChannel",
    "PushResult",
    "RegistryError",
    "RelayConfig",
    "RelayContext",
    "RelayError",
    "S3ObjectStore",
    "TargetGone",
    "build_context",
    "build_object_key",
    "get_config",
    "get_context",
    "push_to",
]
