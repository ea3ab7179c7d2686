"""Object storage for uploaded documents and hanko images."""

import logging
import re
import time
from typing import Optional

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from fastapi import Request

from hankosign.config import Settings

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_file_name(file_name: str) -> str:
    return _UNSAFE_KEY_CHARS.sub("_", file_name)


def generate_file_key(user_id: int, file_name: str, timestamp_ms: Optional[int] = None) -> str:
    """Key for an uploaded document, namespaced by uploader and upload time."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"documents/{user_id}/{timestamp_ms}-{sanitize_file_name(file_name)}"


def generate_hanko_key(user_id: int, hanko_ref: str) -> str:
    return f"hankos/{user_id}/{hanko_ref}.png"


class StorageClient:
    """Thin wrapper over a boto3 S3 client (S3-compatible endpoints supported)."""

    def __init__(self, settings: Settings, client: Optional[BaseClient] = None):
        self.bucket = settings.S3_BUCKET_NAME
        self.region = settings.S3_REGION
        self.endpoint_url = settings.S3_ENDPOINT_URL.rstrip("/") if settings.S3_ENDPOINT_URL else None
        self._client = client or self._build_client(settings)

    def _build_client(self, settings: Settings) -> BaseClient:
        # Self-hosted endpoints (MinIO and friends) need path-style addressing
        config = Config(s3={"addressing_style": "path"}) if self.endpoint_url else None
        return boto3.client(
            "s3",
            region_name=self.region,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            endpoint_url=self.endpoint_url,
            config=config,
        )

    def object_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload_file(self, key: str, body: bytes, content_type: str) -> str:
        """Store ``body`` under ``key`` and return its URL."""
        self._client.put_object(Bucket=self.bucket, Key=key, Body=body, ContentType=content_type)
        logger.info(f"Uploaded {len(body)} bytes to s3://{self.bucket}/{key}")
        return self.object_url(key)

    def delete_file(self, key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=key)
        logger.info(f"Deleted s3://{self.bucket}/{key}")

    def get_presigned_url(self, key: str, expires_in: int = 3600) -> str:
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )


def get_storage(request: Request) -> StorageClient:
    return request.app.state.storage
