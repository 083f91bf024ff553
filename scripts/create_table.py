#!/usr/bin/env python3
"""
Create the connections table on DynamoDB Local and enable TTL on it.
"""

import argparse
import os
import sys

import boto3
from botocore.exceptions import ClientError

DEFAULT_TABLE_NAME = "ws-streaming-upload-connections-dev"
DEFAULT_ENDPOINT = "http://localhost:8000"


def create_table(dynamodb, table_name: str) -> None:
    """
    Create the table keyed by connectionId. An existing table is left alone.
    """
    try:
        dynamodb.create_table(
            TableName=table_name,
            AttributeDefinitions=[{"AttributeName": "connectionId", "AttributeType": "S"}],
            KeySchema=[{"AttributeName": "connectionId", "KeyType": "HASH"}],
            BillingMode="PAY_PER_REQUEST",
        )
        print(f"Table '{table_name}' created successfully")
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"Table '{table_name}' already exists")
        else:
            raise


def enable_ttl(dynamodb, table_name: str) -> None:
    """TTL can't be set by create_table, so it's enabled separately."""
    dynamodb.get_waiter("table_exists").wait(TableName=table_name)
    try:
        dynamodb.update_time_to_live(
            TableName=table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": "ttl"},
        )
        print(f"TTL enabled on '{table_name}' (attribute: ttl)")
    except ClientError as e:
        # Raised when TTL is already enabled
        if e.response["Error"]["Code"] == "ValidationException":
            print(f"TTL already configured on '{table_name}'")
        else:
            raise


def main():
    parser = argparse.ArgumentParser(description="Create the WebSocket connections table")
    parser.add_argument(
        "--table-name",
        default=os.environ.get("CONNECTIONS_TABLE", DEFAULT_TABLE_NAME),
        help="Name of the connections table",
    )
    parser.add_argument(
        "--endpoint-url",
        default=os.environ.get("DYNAMODB_LOCAL_ENDPOINT", DEFAULT_ENDPOINT),
        help="DynamoDB endpoint (defaults to DynamoDB Local)",
    )
    args = parser.parse_args()

    # DynamoDB Local ignores credentials, but boto3 requires some
    dynamodb = boto3.client(
        "dynamodb",
        endpoint_url=args.endpoint_url,
        region_name="localhost",
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )

    try:
        create_table(dynamodb, args.table_name)
        enable_ttl(dynamodb, args.table_name)
    except ClientError as e:
        print(f"Error creating table: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
