"""Binary payload storage for ``file`` and ``image`` records.

The metadata record keeps whatever ``save`` returns as its storage path:
an absolute file path for the local backend, an object key for S3.
"""
import logging
import uuid
from pathlib import Path
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from files_manager.core.config import Settings

logger = logging.getLogger(__name__)


class PayloadStorageError(Exception):
    """A payload could not be written."""


class PayloadMissingError(Exception):
    """The storage path recorded on a file no longer resolves to data."""


class LocalPayloadStore:
    def __init__(self, root: str):
        self.root = Path(root)

    async def save(self, data: bytes, content_type: Optional[str] = None) -> str:
        return await run_in_threadpool(self._write, data)

    async def load(self, path: str) -> bytes:
        return await run_in_threadpool(self._read, path)

    def _write(self, data: bytes) -> str:
        path = self.root / str(uuid.uuid4())
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise PayloadStorageError(str(path)) from exc
        return str(path)

    def _read(self, path: str) -> bytes:
        file_path = Path(path)
        if not file_path.is_file():
            raise PayloadMissingError(path)
        return file_path.read_bytes()


class S3PayloadStore:
    def __init__(self, bucket: str, client: Any):
        self.bucket = bucket
        self.client = client

    async def save(self, data: bytes, content_type: Optional[str] = None) -> str:
        key = str(uuid.uuid4())
        try:
            await run_in_threadpool(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            raise PayloadStorageError(key) from exc
        return key

    async def load(self, path: str) -> bytes:
        try:
            obj = await run_in_threadpool(self.client.get_object, Bucket=self.bucket, Key=path)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404"):
                raise PayloadMissingError(path) from exc
            raise
        return await run_in_threadpool(obj["Body"].read)


def build_payload_store(settings: Settings):
    if settings.storage_backend == "s3":
        s3 = boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
        )
        logger.info("Storing payloads in S3 bucket %s", settings.aws_s3_bucket_name)
        return S3PayloadStore(settings.aws_s3_bucket_name, s3)
    logger.info("Storing payloads under %s", settings.folder_path)
    return LocalPayloadStore(settings.folder_path)
