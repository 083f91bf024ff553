"""
Capability interfaces the handlers depend on, and their boto3-backed
implementations. Each implementation targets either AWS or the local
development stack depending on `RelayConfig.is_offline`.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel

from relay_utils.config import RelayConfig
from relay_utils.errors import ObjectStoreError, RegistryError
from relay_utils.models import ConnectionRecord

logger = logging.getLogger(__name__)
logger.setLevel(logging._nameToLevel.get(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO))

OFFLINE_REGION = "localhost"
OFFLINE_S3_REGION = "us-east-1"
OFFLINE_CREDENTIALS = {"aws_access_key_id": "dummy", "aws_secret_access_key": "dummy"}
MINIO_CREDENTIALS = {"aws_access_key_id": "minioadmin", "aws_secret_access_key": "minioadmin"}


class Delivered(BaseModel):
    pass


class TargetGone(BaseModel):
    connection_id: str


class DeliveryFailed(BaseModel):
    reason: str
    status_code: int | None = None


PushResult = Delivered | TargetGone | DeliveryFailed


class ConnectionRegistry(ABC):
    @abstractmethod
    def put(self, record: ConnectionRecord) -> None: ...

    @abstractmethod
    def delete(self, connection_id: str) -> None:
        """Remove a record; removing a missing record is not an error."""


class ObjectStore(ABC):
    bucket: str

    @abstractmethod
    def put_object(self, key: str, body: bytes, content_type: str) -> None: ...


class PushChannel(ABC):
    @abstractmethod
    def push(self, connection_id: str, endpoint: str, data: str) -> PushResult: ...


class DynamoConnectionRegistry(ConnectionRegistry):
    def __init__(self, client: Any, table_name: str):
        self.client = client
        self.table_name = table_name

    def put(self, record: ConnectionRecord) -> None:
        try:
            self.client.put_item(TableName=self.table_name, Item=record.to_item())
        except (BotoCoreError, ClientError) as e:
            logger.error(f"DynamoDB put_item failed for {record.connection_id}: {e}")
            raise RegistryError(
                "put", record.connection_id, details={"aws_error": str(e)}
            ) from e

    def delete(self, connection_id: str) -> None:
        try:
            self.client.delete_item(
                TableName=self.table_name,
                Key={"connectionId": {"S": connection_id}},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"DynamoDB delete_item failed for {connection_id}: {e}")
            raise RegistryError("delete", connection_id, details={"aws_error": str(e)}) from e


class S3ObjectStore(ObjectStore):
    def __init__(self, client: Any, bucket: str):
        self.client = client
        self.bucket = bucket

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=body, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 put_object failed for {key}: {e}")
            raise ObjectStoreError(key, details={"original_error": str(e)}) from e


class ApiGatewayPushChannel(PushChannel):
    """
    Posts messages through the API Gateway Management API. A client is created
    per callback endpoint and reused for the lifetime of the container.
    """

    def __init__(self, config: RelayConfig):
        self.config = config
        self._clients: dict[str, Any] = {}

    def _client_for(self, endpoint: str) -> Any:
        if self.config.is_offline:
            endpoint = self.config.local_endpoints.websocket

        if endpoint not in self._clients:
            kwargs: dict[str, Any] = {"endpoint_url": endpoint}
            if self.config.is_offline:
                kwargs.update(region_name=OFFLINE_REGION, **OFFLINE_CREDENTIALS)
            else:
                kwargs.update(region_name=self.config.region)
            self._clients[endpoint] = boto3.client("apigatewaymanagementapi", **kwargs)
        return self._clients[endpoint]

    def push(self, connection_id: str, endpoint: str, data: str) -> PushResult:
        client = self._client_for(endpoint)
        try:
            client.post_to_connection(ConnectionId=connection_id, Data=data.encode("utf-8"))
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            status_code = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")

            if error_code == "GoneException" or status_code == 410:
                return TargetGone(connection_id=connection_id)

            # serverless-offline does not implement post_to_connection fully
            if self.config.is_offline and status_code == 404:
                logger.warning(
                    "Local environment: management API not fully supported by "
                    f"serverless-offline. Message would be sent to {connection_id} in production."
                )
                return Delivered()

            return DeliveryFailed(reason=str(e), status_code=status_code)
        except BotoCoreError as e:
            return DeliveryFailed(reason=str(e))

        return Delivered()


def create_dynamodb_client(config: RelayConfig) -> Any:
    if config.is_offline:
        return boto3.client(
            "dynamodb",
            endpoint_url=config.local_endpoints.dynamodb,
            region_name=OFFLINE_REGION,
            **OFFLINE_CREDENTIALS,
        )
    return boto3.client("dynamodb", region_name=config.region)


def create_s3_client(config: RelayConfig) -> Any:
    if config.is_offline:
        return boto3.client(
            "s3",
            endpoint_url=config.local_endpoints.s3,
            region_name=OFFLINE_S3_REGION,
            config=Config(s3={"addressing_style": "path"}),
            **MINIO_CREDENTIALS,
        )
    return boto3.client("s3", region_name=config.region)
