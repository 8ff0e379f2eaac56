"""
Object storage gateway for the S3 bucket and an in-memory test double.

Objects are keyed by their original filename. Two records that upload files
with the same name share (and overwrite) the same object.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol, Union

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from production_api.errors import StorageError

logger = logging.getLogger(__name__)

Source = Union[bytes, BinaryIO]

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def public_url(bucket: str, region: str, key: str) -> str:
    """Canonical public URL of a stored object. Every caller goes through here."""
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def key_from_url(url: str) -> str:
    """Object key of a stored-object URL (its last path segment)."""
    return url.rstrip("/").rsplit("/", 1)[-1]


def _read_source(src: Source) -> bytes:
    if isinstance(src, bytes):
        return src
    return src.read()


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    bucket: str
    region: str

    def store(self, key: str, src: Source, content_type: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def exists(self, key: str) -> bool:
        ...

    def list_keys(self) -> list[str]:
        ...

    def public_url(self, key: str) -> str:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    bucket: str = "test-bucket"
    region: str = "us-east-1"
    objects: dict = field(default_factory=dict)
    content_types: dict = field(default_factory=dict)
    calls: list = field(default_factory=list)
    fail_store_keys: set = field(default_factory=set)
    fail_remove_keys: set = field(default_factory=set)

    def __post_init__(self):
        self._lock = threading.Lock()

    def store(self, key: str, src: Source, content_type: str) -> None:
        with self._lock:
            self.calls.append(("store", key))
        if key in self.fail_store_keys:
            raise StorageError(f"Failed to upload '{key}'")
        data = _read_source(src)
        with self._lock:
            self.objects[key] = data
            self.content_types[key] = content_type

    def remove(self, key: str) -> None:
        with self._lock:
            self.calls.append(("remove", key))
        if key in self.fail_remove_keys:
            raise StorageError(f"Failed to delete '{key}'")
        with self._lock:
            self.objects.pop(key, None)
            self.content_types.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self.objects

    def list_keys(self) -> list[str]:
        return sorted(self.objects)

    def public_url(self, key: str) -> str:
        return public_url(self.bucket, self.region, key)

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    def reset(self) -> None:
        self.objects.clear()
        self.content_types.clear()
        self.calls.clear()
        self.fail_store_keys.clear()
        self.fail_remove_keys.clear()


@dataclass
class S3StorageClient:
    """
    boto3-backed client for a single S3 bucket.
    """

    bucket: str
    region: str
    access_key_id: str = ""
    secret_access_key: str = ""
    endpoint: str = ""
    max_attempts: int = 3

    def __post_init__(self):
        config = Config(
            signature_version="s3v4",
            retries={"max_attempts": self.max_attempts, "mode": "standard"},
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def store(self, key: str, src: Source, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=src,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Upload of %s to %s failed", key, self.bucket)
            raise StorageError(f"Failed to upload '{key}'") from exc

    def remove(self, key: str) -> None:
        # S3 answers 204 for keys that do not exist, so this is idempotent.
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to delete '{key}'") from exc

    def exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                return False
            raise StorageError(f"Failed to look up '{key}'") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Failed to look up '{key}'") from exc
        return True

    def list_keys(self) -> list[str]:
        keys: list[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket):
                keys.extend(item["Key"] for item in page.get("Contents", []))
        except (BotoCoreError, ClientError) as exc:
            raise StorageError("Failed to list stored objects") from exc
        return keys

    def public_url(self, key: str) -> str:
        return public_url(self.bucket, self.region, key)
