import json
import os
import sys
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

# Add the relay_utils directory to sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from relay_utils.clients import (  # noqa: E402
    ApiGatewayPushChannel,
    Delivered,
    DeliveryFailed,
    DynamoConnectionRegistry,
    S3ObjectStore,
    TargetGone,
)
from relay_utils.config import RelayConfig  # noqa: E402
from relay_utils.errors import MessageDeliveryError, ObjectStoreError, RegistryError  # noqa: E402
from relay_utils.models import (  # noqa: E402
    ConnectionRecord,
    InboundMessage,
    OutboundMessage,
    build_object_key,
)
from relay_utils.push import push_to  # noqa: E402


def client_error(code: str, status: int, operation: str = "PostToConnection") -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} occurred"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class TestRelayConfig:
    def test_defaults(self):
        config = RelayConfig.from_env({})

        assert config.connections_table == "ws-streaming-upload-connections-dev"
        assert config.bucket_name == "ws-streaming-upload-dev"
        assert config.region == "ap-northeast-1"
        assert config.is_offline is False

    @pytest.mark.parametrize("flag, expected", [("true", True), ("1", True), ("false", False)])
    def test_offline_flag(self, flag, expected):
        assert RelayConfig.from_env({"IS_OFFLINE": flag}).is_offline is expected

    def test_overrides(self):
        config = RelayConfig.from_env(
            {
                "CONNECTIONS_TABLE": "connections-prod",
                "S3_BUCKET_NAME": "uploads-prod",
                "AWS_REGION": "us-west-2",
                "S3_LOCAL_ENDPOINT": "http://minio:9000",
            }
        )

        assert config.connections_table == "connections-prod"
        assert config.bucket_name == "uploads-prod"
        assert config.region == "us-west-2"
        assert config.local_endpoints.s3 == "http://minio:9000"
        assert config.local_endpoints.dynamodb == "http://localhost:8000"


class TestModels:
    def test_connection_record_expires_after_a_day(self):
        record = ConnectionRecord.create("abc123", 1000)

        assert record.connected_at == 1000
        assert record.expires_at == 87400
        assert record.to_item() == {
            "connectionId": {"S": "abc123"},
            "connectedAt": {"N": "1000"},
            "ttl": {"N": "87400"},
        }

    @pytest.mark.parametrize(
        "file_name, expected",
        [("a.txt", "abc123/5000-a.txt"), (None, "abc123/5000-upload"), ("", "abc123/5000-upload")],
    )
    def test_build_object_key(self, file_name, expected):
        assert build_object_key("abc123", 5000, file_name) == expected

    def test_outbound_message_omits_empty_fields(self):
        message = OutboundMessage(type="error", message="Unknown action")

        assert json.loads(message.to_json()) == {"type": "error", "message": "Unknown action"}

    def test_inbound_message_keeps_unset_fields_out_of_payload(self):
        message = InboundMessage.from_body({"foo": "bar"})

        assert message.action is None
        assert message.to_payload() == {"foo": "bar"}

    def test_inbound_message_reads_known_fields_leniently(self):
        message = InboundMessage.from_body({"fileName": 5, "contentType": {"x": 1}, "foo": "bar"})

        assert message.file_name == "5"
        assert message.content_type is None
        assert message.to_payload() == {"fileName": 5, "contentType": {"x": 1}, "foo": "bar"}

    def test_inbound_message_ignores_snake_case_keys(self):
        message = InboundMessage.from_body({"file_name": "x.txt"})

        assert message.file_name is None
        assert message.to_payload() == {"file_name": "x.txt"}


class TestDynamoConnectionRegistry:
    def test_put(self):
        client = MagicMock()
        registry = DynamoConnectionRegistry(client, "connections")

        registry.put(ConnectionRecord.create("abc123", 1000))

        client.put_item.assert_called_once_with(
            TableName="connections",
            Item={
                "connectionId": {"S": "abc123"},
                "connectedAt": {"N": "1000"},
                "ttl": {"N": "87400"},
            },
        )

    def test_delete(self):
        client = MagicMock()
        registry = DynamoConnectionRegistry(client, "connections")

        registry.delete("abc123")

        client.delete_item.assert_called_once_with(
            TableName="connections", Key={"connectionId": {"S": "abc123"}}
        )

    def test_failure_raises_registry_error(self):
        client = MagicMock()
        client.put_item.side_effect = client_error("ProvisionedThroughputExceededException", 400)
        registry = DynamoConnectionRegistry(client, "connections")

        with pytest.raises(RegistryError) as exc_info:
            registry.put(ConnectionRecord.create("abc123", 1000))

        assert exc_info.value.operation == "put"
        assert exc_info.value.connection_id == "abc123"


class TestS3ObjectStore:
    def test_put_object(self):
        client = MagicMock()
        store = S3ObjectStore(client, "uploads")

        store.put_object("abc123/5000-a.txt", b"hello", "text/plain")

        client.put_object.assert_called_once_with(
            Bucket="uploads", Key="abc123/5000-a.txt", Body=b"hello", ContentType="text/plain"
        )

    def test_failure_carries_original_message(self):
        client = MagicMock()
        client.put_object.side_effect = client_error("NoSuchBucket", 404, "PutObject")
        store = S3ObjectStore(client, "uploads")

        with pytest.raises(ObjectStoreError) as exc_info:
            store.put_object("abc123/5000-a.txt", b"hello", "text/plain")

        assert "NoSuchBucket" in str(exc_info.value)


class TestApiGatewayPushChannel:
    @patch("relay_utils.clients.boto3")
    def test_client_uses_callback_endpoint(self, mock_boto3):
        channel = ApiGatewayPushChannel(RelayConfig())

        result = channel.push("abc123", "https://example.com/dev", '{"type": "message"}')

        assert result == Delivered()
        mock_boto3.client.assert_called_once_with(
            "apigatewaymanagementapi",
            endpoint_url="https://example.com/dev",
            region_name="ap-northeast-1",
        )
        mock_boto3.client.return_value.post_to_connection.assert_called_once_with(
            ConnectionId="abc123", Data=b'{"type": "message"}'
        )

    @patch("relay_utils.clients.boto3")
    def test_client_reused_per_endpoint(self, mock_boto3):
        channel = ApiGatewayPushChannel(RelayConfig())

        channel.push("abc123", "https://example.com/dev", "{}")
        channel.push("def456", "https://example.com/dev", "{}")

        assert mock_boto3.client.call_count == 1

    @patch("relay_utils.clients.boto3")
    def test_offline_uses_local_endpoint(self, mock_boto3):
        channel = ApiGatewayPushChannel(RelayConfig(is_offline=True))

        channel.push("abc123", "https://example.com/dev", "{}")

        mock_boto3.client.assert_called_once_with(
            "apigatewaymanagementapi",
            endpoint_url="http://localhost:3001",
            region_name="localhost",
            aws_access_key_id="dummy",
            aws_secret_access_key="dummy",
        )

    @patch("relay_utils.clients.boto3")
    def test_gone_connection(self, mock_boto3):
        mock_boto3.client.return_value.post_to_connection.side_effect = client_error(
            "GoneException", 410
        )
        channel = ApiGatewayPushChannel(RelayConfig())

        assert channel.push("abc123", "https://example.com/dev", "{}") == TargetGone(
            connection_id="abc123"
        )

    @patch("relay_utils.clients.boto3")
    def test_other_failure(self, mock_boto3):
        mock_boto3.client.return_value.post_to_connection.side_effect = client_error(
            "LimitExceededException", 429
        )
        channel = ApiGatewayPushChannel(RelayConfig())

        result = channel.push("abc123", "https://example.com/dev", "{}")

        assert isinstance(result, DeliveryFailed)
        assert result.status_code == 429

    @pytest.mark.parametrize("is_offline, expected", [(True, Delivered), (False, DeliveryFailed)])
    @patch("relay_utils.clients.boto3")
    def test_not_found_tolerated_only_offline(self, mock_boto3, is_offline, expected):
        mock_boto3.client.return_value.post_to_connection.side_effect = client_error(
            "NotFoundException", 404
        )
        channel = ApiGatewayPushChannel(RelayConfig(is_offline=is_offline))

        assert isinstance(channel.push("abc123", "https://example.com/dev", "{}"), expected)


class TestPushTo:
    """Test cases for push delivery and stale-connection cleanup"""

    def test_delivered(self):
        channel = MagicMock()
        channel.push.return_value = Delivered()
        registry = MagicMock()

        push_to(
            channel, registry, "abc123", "https://example.com/dev", OutboundMessage(type="message")
        )

        channel.push.assert_called_once_with(
            "abc123", "https://example.com/dev", json.dumps({"type": "message"})
        )
        registry.delete.assert_not_called()

    def test_gone_connection_is_removed(self):
        channel = MagicMock()
        channel.push.return_value = TargetGone(connection_id="abc123")
        registry = MagicMock()

        push_to(
            channel, registry, "abc123", "https://example.com/dev", OutboundMessage(type="message")
        )

        registry.delete.assert_called_once_with("abc123")

    def test_cleanup_failure_is_swallowed(self):
        channel = MagicMock()
        channel.push.return_value = TargetGone(connection_id="abc123")
        registry = MagicMock()
        registry.delete.side_effect = RegistryError("delete", "abc123")

        push_to(
            channel, registry, "abc123", "https://example.com/dev", OutboundMessage(type="message")
        )

        registry.delete.assert_called_once_with("abc123")

    def test_failure_raises(self):
        channel = MagicMock()
        channel.push.return_value = DeliveryFailed(reason="internal error", status_code=500)
        registry = MagicMock()

        with pytest.raises(MessageDeliveryError) as exc_info:
            endpoint = "https://example.com/dev"
            push_to(channel, registry, "abc123", endpoint, OutboundMessage(type="error"))

        assert exc_info.value.connection_id == "abc123"
        registry.delete.assert_not_called()
