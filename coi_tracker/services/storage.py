# COMPONENT: SNAPSHOT STORAGE SLOTS
# REQUIREMENTS SATISFIED: durable key-value slot with S3 and local fallback
"""
coi_tracker/services/storage.py

Defines the durable key-value slots the persistence adapter writes to.

A slot stores one text value under a stable key and replaces it wholesale
on every write. Three backends are provided and selected at runtime from
configuration:

    - LocalFileSlot : one JSON file per key under a local directory
      (development, tests, single-machine deployments)
    - S3Slot        : one object per key in an S3 bucket (Lambda deployments)
    - MemorySlot    : process memory only (COI_STORAGE=memory, tests)

Each returns None from `read` when nothing has been stored yet. Any other
failure propagates so the persistence adapter can decide how to recover.
"""
import os
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from ..config import Settings
from ..utils.logging import get_logger

logger = get_logger("storage")


class LocalFileSlot:
    def __init__(self, directory: str, key: str):
        self.directory = directory
        self.key = key

    @property
    def path(self) -> str:
        return os.path.join(self.directory, f"{self.key}.json")

    def read(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

    def write(self, data: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        # Write to a sibling file first so a crash never leaves half a snapshot
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, self.path)

    def describe(self) -> str:
        return self.path


class MemorySlot:
    """Slot that keeps the snapshot in process memory."""

    def __init__(self, data: Optional[str] = None):
        self.data = data

    def read(self) -> Optional[str]:
        return self.data

    def write(self, data: str) -> None:
        self.data = data

    def describe(self) -> str:
        return "memory"


class S3Slot:
    def __init__(self, bucket: str, key: str, prefix: str = "", region: Optional[str] = None):
        self.bucket = bucket
        self.object_key = f"{prefix}{key}.json"
        self._region = region
        self._s3 = None

    def _client(self):
        """
        Create the S3 client lazily.
        - In Lambda: boto3 auto-detects region from the runtime env (AWS_REGION).
        - Locally: use AWS config or the configured region if present.
        """
        if self._s3 is None:
            if self._region:
                self._s3 = boto3.client("s3", region_name=self._region)
            else:
                self._s3 = boto3.client("s3")
        return self._s3

    def read(self) -> Optional[str]:
        try:
            obj = self._client().get_object(Bucket=self.bucket, Key=self.object_key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404"):
                return None
            raise
        return obj["Body"].read().decode("utf-8")

    def write(self, data: str) -> None:
        self._client().put_object(
            Bucket=self.bucket,
            Key=self.object_key,
            Body=data.encode("utf-8"),
            ContentType="application/json",
        )

    def describe(self) -> str:
        return f"s3://{self.bucket}/{self.object_key}"


def get_slot(settings: Settings):
    """Build the slot selected by COI_STORAGE."""
    if settings.storage_backend == "memory":
        return MemorySlot()
    if settings.storage_backend == "s3":
        if not settings.s3_bucket:
            raise RuntimeError("S3_BUCKET not set")
        slot = S3Slot(
            settings.s3_bucket,
            settings.store_key,
            prefix=settings.s3_prefix,
            region=settings.aws_region,
        )
    else:
        slot = LocalFileSlot(settings.local_storage_dir, settings.store_key)

    logger.info("Snapshot slot: %s", slot.describe())
    return slot
