import logging
import os
from functools import lru_cache

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))

DEFAULT_CONNECTIONS_TABLE = "ws-streaming-upload-connections-dev"
DEFAULT_BUCKET_NAME = "ws-streaming-upload-dev"
DEFAULT_REGION = "ap-northeast-1"


class LocalEndpoints(BaseModel):
    """Endpoints used when running against DynamoDB Local, MinIO and serverless-offline."""

    dynamodb: str = "http://localhost:8000"
    s3: str = "http://localhost:9000"
    websocket: str = "http://localhost:3001"


class RelayConfig(BaseModel):
    connections_table: str = DEFAULT_CONNECTIONS_TABLE
    bucket_name: str = DEFAULT_BUCKET_NAME
    region: str = DEFAULT_REGION
    is_offline: bool = False
    local_endpoints: LocalEndpoints = Field(default_factory=LocalEndpoints)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "RelayConfig":
        """
        Build the configuration from environment variables, falling back to the
        development defaults for anything unset.
        """
        env = os.environ if environ is None else environ

        is_offline = env.get("IS_OFFLINE", "").lower() in ("true", "1")
        local_endpoints = LocalEndpoints(
            dynamodb=env.get("DYNAMODB_LOCAL_ENDPOINT", LocalEndpoints().dynamodb),
            s3=env.get("S3_LOCAL_ENDPOINT", LocalEndpoints().s3),
            websocket=env.get("WEBSOCKET_LOCAL_ENDPOINT", LocalEndpoints().websocket),
        )

        return cls(
            connections_table=env.get("CONNECTIONS_TABLE") or DEFAULT_CONNECTIONS_TABLE,
            bucket_name=env.get("S3_BUCKET_NAME") or DEFAULT_BUCKET_NAME,
            region=env.get("AWS_REGION") or DEFAULT_REGION,
            is_offline=is_offline,
            local_endpoints=local_endpoints,
        )


@lru_cache(maxsize=1)
def get_config() -> RelayConfig:
    """Resolve the configuration once per Lambda container."""
    config = RelayConfig.from_env()
    logger.info(
        f"Resolved relay configuration: table={config.connections_table}, "
        f"bucket={config.bucket_name}, offline={config.is_offline}"
    )
    return config
