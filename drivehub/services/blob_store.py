"""Object storage for file bytes.

The rest of the app only sees :class:`BlobStore`; production wires in
:class:`MinioBlobStore`, tests an in-memory double.
"""
import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from io import BytesIO
from typing import Literal
from urllib.parse import quote

from minio import Minio
from minio.error import S3Error

from drivehub.core.exceptions import StorageError
from drivehub.utils.logging import get_logger

logger = get_logger(__name__)

Disposition = Literal["attachment", "inline"]


@dataclass(frozen=True)
class BlobRef:
    """Where an uploaded blob lives"""
    object_id: str
    url: str


def content_disposition(disposition: Disposition, filename: str) -> str:
    return f"{disposition}; filename*=UTF-8''{quote(filename)}"


class BlobStore(ABC):
    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str) -> BlobRef:
        """Store ``data`` under ``key``; raises StorageError when the store refuses"""

    @abstractmethod
    async def get_url(self, object_id: str, filename: str, disposition: Disposition) -> str:
        """Short-lived URL that serves the object with the given disposition"""

    @abstractmethod
    async def delete(self, object_id: str) -> None:
        ...


class MinioBlobStore(BlobStore):
    """Single-bucket MinIO store; blocking SDK calls run on worker threads"""

    def __init__(
        self,
        client: Minio,
        bucket: str,
        endpoint_url: str,
        url_expire_minutes: int = 10,
        max_retries: int = 3,
        retry_backoff: float = 0.5,
    ):
        self.client = client
        self.bucket = bucket
        self.endpoint_url = endpoint_url.rstrip("/")
        self.url_expire_minutes = url_expire_minutes
        self.max_retries = max(1, max_retries)
        self.retry_backoff = retry_backoff

    @classmethod
    def from_settings(cls, settings) -> "MinioBlobStore":
        client = Minio(
            endpoint=settings.MINIO_URL.replace("http://", "").replace("https://", ""),
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SSL,
        )
        return cls(
            client,
            bucket=settings.MINIO_BUCKET,
            endpoint_url=settings.MINIO_URL,
            url_expire_minutes=settings.MINIO_URL_EXPIRE_MINUTES,
            max_retries=settings.MINIO_MAX_RETRIES,
            retry_backoff=settings.MINIO_RETRY_BACKOFF,
        )

    async def ensure_bucket(self) -> None:
        try:
            if not await asyncio.to_thread(self.client.bucket_exists, self.bucket):
                await asyncio.to_thread(self.client.make_bucket, self.bucket)
                logger.info(f"Created MinIO bucket {self.bucket}")
        except S3Error as e:
            logger.error(f"Error preparing bucket {self.bucket}: {e}")
            raise StorageError(f"Cannot prepare bucket {self.bucket}")

    async def upload(self, key: str, data: bytes, content_type: str) -> BlobRef:
        last_error: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                await asyncio.to_thread(
                    self.client.put_object,
                    self.bucket,
                    key,
                    BytesIO(data),
                    len(data),
                    content_type=content_type,
                )
                return BlobRef(object_id=key, url=f"{self.endpoint_url}/{self.bucket}/{key}")
            except Exception as e:
                last_error = e
                logger.warning(f"Upload of {key} failed (attempt {attempt}/{self.max_retries}): {e}")
                if attempt < self.max_retries:
                    await asyncio.sleep(self.retry_backoff)

        logger.error(f"Giving up on upload of {key}: {last_error}")
        raise StorageError("Failed to store file content")

    async def get_url(self, object_id: str, filename: str, disposition: Disposition) -> str:
        def _presign():
            return self.client.presigned_get_object(
                self.bucket,
                object_id,
                expires=timedelta(minutes=self.url_expire_minutes),
                response_headers={"response-content-disposition": content_disposition(disposition, filename)},
            )

        try:
            return await asyncio.to_thread(_presign)
        except Exception as e:
            logger.error(f"Error getting URL for {self.bucket}/{object_id}: {e}")
            raise StorageError("Failed to produce a download URL")

    async def delete(self, object_id: str) -> None:
        try:
            await asyncio.to_thread(self.client.remove_object, self.bucket, object_id)
        except Exception as e:
            logger.error(f"Error removing object {object_id} from {self.bucket}: {e}")
            raise StorageError("Failed to remove file content")
