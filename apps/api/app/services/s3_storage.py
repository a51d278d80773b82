from __future__ import annotations

import boto3
from botocore.client import BaseClient
from botocore.config import Config


def create_s3_client(
    *,
    access_key_id: str,
    secret_access_key: str,
    region: str,
    endpoint_url: str | None = None,
) -> BaseClient:
    """Build an S3 client bound to one static credential pair.

    Blank credentials are accepted here; the resulting URLs are simply
    rejected by S3 when used.
    """
    return boto3.client(
        "s3",
        region_name=region,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        endpoint_url=endpoint_url or f"https://s3.{region}.amazonaws.com",
        config=Config(signature_version="s3v4"),
    )


def generate_presigned_get_url(
    *,
    client: BaseClient,
    bucket: str,
    key: str,
    expires_in: int = 900,
) -> str:
    return client.generate_presigned_url(
        "get_object",
        Params={
            "Bucket": bucket,
            "Key": key,
        },
        ExpiresIn=expires_in,
        HttpMethod="GET",
    )
