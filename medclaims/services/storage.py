"""
MinIO Object Storage Service
S3-compatible storage for uploaded medical documents
Source: https://min.io/docs/minio/linux/developers/python/minio-py.html
"""

from functools import lru_cache
from io import BytesIO

from anyio import to_thread
from minio import Minio
from minio.error import S3Error

from medclaims.api.config import Settings, get_settings
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)


class StorageService:
    """
    MinIO storage for medical documents.

    The MinIO client is blocking; every call runs in a worker thread.
    """

    def __init__(self, settings: Settings):
        self.bucket = settings.MINIO_BUCKET_DOCUMENTS
        self.public_base_url = settings.storage_public_base_url
        self.client = Minio(
            settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
            region=settings.MINIO_REGION,
        )
        self._bucket_ready = False
        logger.info(f"MinIO client initialized: {settings.MINIO_ENDPOINT}")

    def public_url(self, object_name: str) -> str:
        return f"{self.public_base_url}/{object_name}"

    async def upload_bytes(self, object_name: str, data: bytes, content_type: str) -> str:
        """
        Store ``data`` under ``object_name``.

        Returns:
            Public URL of the stored object
        """
        try:
            await to_thread.run_sync(self._upload_sync, object_name, data, content_type)
        except S3Error as e:
            logger.error(f"Error uploading {object_name}: {e}")
            raise
        return self.public_url(object_name)

    async def delete(self, object_name: str) -> None:
        try:
            await to_thread.run_sync(self._delete_sync, object_name)
        except S3Error as e:
            logger.error(f"Error deleting {object_name}: {e}")
            raise

    async def check(self) -> bool:
        """Whether the storage endpoint answers."""
        try:
            await to_thread.run_sync(self.client.bucket_exists, self.bucket)
            return True
        except Exception as e:
            logger.warning(f"Storage health check failed: {e}")
            return False

    # ------------------------------------------------------------------
    # Blocking helpers (run via anyio.to_thread)
    # ------------------------------------------------------------------

    def _ensure_bucket_sync(self) -> None:
        if self._bucket_ready:
            return
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)
            logger.info(f"Created bucket: {self.bucket}")
        self._bucket_ready = True

    def _upload_sync(self, object_name: str, data: bytes, content_type: str) -> None:
        self._ensure_bucket_sync()
        self.client.put_object(
            self.bucket,
            object_name,
            BytesIO(data),
            len(data),
            content_type=content_type,
        )
        logger.info(f"Uploaded file: {self.bucket}/{object_name}")

    def _delete_sync(self, object_name: str) -> None:
        self.client.remove_object(self.bucket, object_name)
        logger.info(f"Deleted file: {self.bucket}/{object_name}")


@lru_cache
def get_storage() -> StorageService:
    """Storage dependency; one client per process."""
    return StorageService(get_settings())
