#!/usr/bin/env python3
"""
Create the upload bucket on a local MinIO server.
"""

import argparse
import os
import sys

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

DEFAULT_BUCKET_NAME = "ws-streaming-upload-dev"
DEFAULT_ENDPOINT = "http://localhost:9000"


def setup_bucket(s3, bucket_name: str) -> None:
    try:
        s3.create_bucket(Bucket=bucket_name)
        print(f"Bucket '{bucket_name}' created successfully")
    except ClientError as e:
        if e.response["Error"]["Code"] in ("BucketAlreadyExists", "BucketAlreadyOwnedByYou"):
            print(f"Bucket '{bucket_name}' already exists")
        else:
            raise


def main():
    parser = argparse.ArgumentParser(description="Create the upload bucket on MinIO")
    parser.add_argument(
        "--bucket-name",
        default=os.environ.get("S3_BUCKET_NAME", DEFAULT_BUCKET_NAME),
        help="Name of the upload bucket",
    )
    parser.add_argument(
        "--endpoint-url",
        default=os.environ.get("S3_LOCAL_ENDPOINT", DEFAULT_ENDPOINT),
        help="S3 endpoint (defaults to MinIO)",
    )
    args = parser.parse_args()

    # MinIO requires path-style addressing
    s3 = boto3.client(
        "s3",
        endpoint_url=args.endpoint_url,
        region_name="us-east-1",
        aws_access_key_id="minioadmin",
        aws_secret_access_key="minioadmin",
        config=Config(s3={"addressing_style": "path"}),
    )

    try:
        setup_bucket(s3, args.bucket_name)
    except ClientError as e:
        print(f"Error creating bucket: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
