"""
Blob storage backends for image renditions.

All renditions live in a single container (an S3 bucket or a local
directory) keyed by blob name.  Writing an existing key replaces it.
"""

from __future__ import annotations

import os
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from news_migration.config import StorageConfig
from news_migration.utils.errors import ConfigError, ImageStorageError


class BlobStorage:
    """Interface shared by the storage backends."""

    def __init__(self, public_base_url: str = "") -> None:
        self.public_base_url = public_base_url.rstrip("/")

    def upload(self, blob_name: str, data: bytes, content_type: str) -> None:
        raise NotImplementedError

    def url_for(self, blob_name: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{blob_name}"
        return blob_name


class S3BlobStorage(BlobStorage):
    def __init__(self, bucket: str, public_base_url: str = "", client: Optional[Any] = None) -> None:
        super().__init__(public_base_url)
        if not bucket:
            raise ConfigError("storage.bucket is required for the s3 backend")
        self.bucket = bucket
        self.client = client or boto3.client("s3")

    def upload(self, blob_name: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=blob_name,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise ImageStorageError(blob_name, f"upload to s3://{self.bucket} failed: {e}") from e


class LocalBlobStorage(BlobStorage):
    def __init__(self, directory: str, public_base_url: str = "") -> None:
        super().__init__(public_base_url)
        self.directory = directory

    def upload(self, blob_name: str, data: bytes, content_type: str) -> None:
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(os.path.join(self.directory, blob_name), "wb") as f:
                f.write(data)
        except OSError as e:
            raise ImageStorageError(blob_name, f"write to {self.directory} failed: {e}") from e

    def url_for(self, blob_name: str) -> str:
        if self.public_base_url:
            return super().url_for(blob_name)
        return os.path.join(self.directory, blob_name)


def build_storage(cfg: StorageConfig) -> BlobStorage:
    if cfg.backend == "s3":
        return S3BlobStorage(cfg.bucket, cfg.public_base_url)
    return LocalBlobStorage(cfg.directory, cfg.public_base_url)
