import time
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import lru_cache

from relay_utils.clients import (
    ApiGatewayPushChannel,
    ConnectionRegistry,
    DynamoConnectionRegistry,
    ObjectStore,
    PushChannel,
    S3ObjectStore,
    create_dynamodb_client,
    create_s3_client,
)
from relay_utils.config import RelayConfig, get_config
from relay_utils.models import OutboundMessage
from relay_utils.push import push_to


@dataclass
class RelayContext:
    """Everything a handler needs to talk to the outside world."""

    config: RelayConfig
    registry: ConnectionRegistry
    store: ObjectStore
    channel: PushChannel
    clock: Callable[[], float] = field(default=time.time)

    def now(self) -> int:
        """Current Unix time in seconds."""
        return int(self.clock())

    def now_millis(self) -> int:
        return int(self.clock() * 1000)

    def push(self, connection_id: str, endpoint: str, message: OutboundMessage) -> None:
        push_to(self.channel, self.registry, connection_id, endpoint, message)


def build_context(config: RelayConfig) -> RelayContext:
    return RelayContext(
        config=config,
        registry=DynamoConnectionRegistry(create_dynamodb_client(config), config.connections_table),
        store=S3ObjectStore(create_s3_client(config), config.bucket_name),
        channel=ApiGatewayPushChannel(config),
    )


@lru_cache(maxsize=1)
def get_context() -> RelayContext:
    """Build the clients once per Lambda container and reuse them across invocations."""
    return build_context(get_config())
