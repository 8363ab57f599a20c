from __future__ import annotations
import io
import mimetypes
from functools import lru_cache
from pathlib import Path
from typing import Protocol
import structlog
from minio import Minio
from minio.error import S3Error
from scavenger.config import settings

log = structlog.get_logger()

MEDIA_PREFIX = "/media"

class BlobStore(Protocol):
    def put_bytes(self, key: str, data: bytes, content_type: str) -> None: ...
    def get_bytes(self, key: str) -> tuple[bytes, str]: ...
    def delete(self, key: str) -> None: ...


def _parse_endpoint(ep: str) -> tuple[str, bool]:
    # Return (host:port, secure)
    secure = ep.startswith("https://")
    host = ep.replace("http://", "").replace("https://", "")
    return host, secure


class S3BlobStore:
    """Photos in an S3 bucket (MinIO in dev)."""

    def __init__(self, endpoint: str, access_key: str, secret_key: str, bucket: str):
        host, secure = _parse_endpoint(endpoint)
        self._client = Minio(host, access_key=access_key, secret_key=secret_key, secure=secure)
        self._bucket = bucket
        self._bucket_ready = False

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        try:
            if not self._client.bucket_exists(self._bucket):
                self._client.make_bucket(self._bucket)
        except S3Error as e:
            # Another worker may have created it between the two calls
            if e.code not in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
                raise
        self._bucket_ready = True

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        self._ensure_bucket()
        self._client.put_object(self._bucket, key, io.BytesIO(data), length=len(data), content_type=content_type)

    def get_bytes(self, key: str) -> tuple[bytes, str]:
        """
        Retrieve object from storage.
        Returns (data, content_type).
        """
        try:
            response = self._client.get_object(self._bucket, key)
            try:
                data = response.read()
                content_type = response.headers.get("Content-Type", "application/octet-stream")
            finally:
                response.close()
                response.release_conn()
            return data, content_type
        except S3Error as e:
            if e.code == "NoSuchKey":
                raise FileNotFoundError(f"Object not found: {key}")
            raise

    def delete(self, key: str) -> None:
        # S3 delete is idempotent; a missing key is not an error
        self._client.remove_object(self._bucket, key)


class LocalBlobStore:
    """Photos on local disk under `root`. Used for single-host events and tests."""

    def __init__(self, root: str | Path):
        self._root = Path(root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if self._root not in path.parents:
            raise FileNotFoundError(f"Object not found: {key}")
        return path

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def get_bytes(self, key: str) -> tuple[bytes, str]:
        path = self._path(key)
        if not path.is_file():
            raise FileNotFoundError(f"Object not found: {key}")
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return path.read_bytes(), content_type

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    if settings.storage_backend == "local":
        return LocalBlobStore(settings.upload_dir)
    return S3BlobStore(
        settings.s3_endpoint, settings.s3_access_key, settings.s3_secret_key, settings.s3_bucket_uploads
    )


def media_url(key: str | None) -> str | None:
    # Photos are served through the API (GET /media/{key}); storage keys stay server-side
    return f"{MEDIA_PREFIX}/{key}" if key else None


def discard_blob(store: BlobStore, key: str | None) -> None:
    """Remove a blob whose row no longer references it. Failures leave an orphan and are logged."""
    if not key:
        return
    try:
        store.delete(key)
    except (OSError, S3Error) as e:
        log.warning("blob_delete_failed", key=key, error=str(e))
