"""
Banner image storage. S3 bucket in production, local folder (served under /images) for
development and tests. Both resolve the value kept in Announcement.images:
- "" -> nothing stored
- "<bucket base url><key>" -> S3 object
- "/images/<key>" (or legacy "images/<key>") -> local file
Deleting an object that is already gone is not an error.
"""
import logging
from pathlib import Path

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from nurul_iman.config import Settings
from nurul_iman.errors import StorageError

logger = logging.getLogger(__name__)

LOCAL_URL_PREFIX = "/images/"
_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


class LocalStorage:
    def __init__(self, base_dir: Path, url_prefix: str = LOCAL_URL_PREFIX):
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix

    def _path(self, key: str) -> Path:
        base = self.base_dir.resolve()
        path = (base / key).resolve()
        try:
            path.relative_to(base)
        except ValueError:
            raise StorageError("Invalid storage key") from None
        return path

    def key_for(self, reference: str) -> str | None:
        if reference.startswith(self.url_prefix):
            return reference[len(self.url_prefix):]
        legacy = self.url_prefix.lstrip("/")
        if reference.startswith(legacy):
            return reference[len(legacy):]
        return None

    def upload(self, key: str, data: bytes, content_type: str | None = None) -> str:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error("Local upload failed for %s: %s", key, e)
            raise StorageError("Upload failed") from e
        return f"{self.url_prefix}{key}"

    def delete(self, reference: str) -> None:
        if not reference:
            return
        key = self.key_for(reference)
        if key is None:
            raise StorageError("Unknown image location")
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Local delete failed for %s: %s", key, e)
            raise StorageError("Delete failed") from e

    def exists(self, reference: str) -> bool:
        key = self.key_for(reference or "")
        return key is not None and self._path(key).is_file()


class S3Storage:
    """Public-read objects in one bucket. Local references are handed to `local` (older rows)."""

    def __init__(self, client, bucket: str, base_url: str, local: LocalStorage | None = None):
        self.client = client
        self.bucket = bucket
        self.base_url = base_url
        self.local = local

    def key_for(self, reference: str) -> str | None:
        if reference.startswith(self.base_url):
            return reference[len(self.base_url):]
        return None

    def upload(self, key: str, data: bytes, content_type: str | None = None) -> str:
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ACL="public-read",
                **extra,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload failed bucket=%s key=%s: %s", self.bucket, key, e)
            raise StorageError("Upload failed") from e
        return f"{self.base_url}{key}"

    def delete(self, reference: str) -> None:
        if not reference:
            return
        key = self.key_for(reference)
        if key is None:
            if self.local is not None and self.local.key_for(reference) is not None:
                self.local.delete(reference)
                return
            raise StorageError("Unknown image location")
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 delete failed bucket=%s key=%s: %s", self.bucket, key, e)
            raise StorageError("Delete failed") from e

    def exists(self, reference: str) -> bool:
        key = self.key_for(reference or "")
        if key is None:
            return self.local is not None and self.local.exists(reference)
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if str(e.response.get("Error", {}).get("Code")) in _MISSING_CODES:
                return False
            raise StorageError("Storage unavailable") from e
        except BotoCoreError as e:
            raise StorageError("Storage unavailable") from e
        return True


def local_storage_dir(settings: Settings) -> Path:
    if settings.local_storage_dir:
        return Path(settings.local_storage_dir)
    return Path(__file__).resolve().parent.parent.parent / "images"


def build_s3_client(settings: Settings):
    return boto3.client(
        "s3",
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
        region_name=settings.aws_region,
        config=Config(signature_version="s3v4"),
    )


def build_storage(settings: Settings, s3_client=None):
    """Storage backend from settings. Pass s3_client to reuse or stub a client."""
    local = LocalStorage(local_storage_dir(settings))
    if settings.storage_backend == "local":
        logger.info("Banner storage: local folder %s", local.base_dir)
        return local
    if settings.storage_backend != "s3":
        raise ValueError(f"Unknown storage_backend: {settings.storage_backend!r}")
    client = s3_client or build_s3_client(settings)
    logger.info("Banner storage: s3 bucket %s", settings.s3_bucket)
    return S3Storage(client, settings.s3_bucket, settings.bucket_base_url, local=local)
