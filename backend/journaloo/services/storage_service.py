"""
Entry image storage on an S3-compatible object store, plus an in-memory double.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Protocol
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from journaloo.core.config import settings
from journaloo.core.exceptions import ImageNotFoundError, StorageError

logger = logging.getLogger(__name__)

MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


def image_key(entry_id: int) -> str:
    """Object key holding an entry's image."""
    return f"entries/{entry_id}/image"


@dataclass
class StoredImage:
    data: bytes
    content_type: str


class StorageClient(Protocol):
    """Operations the API needs from object storage."""

    def put_image(self, entry_id: int, data: bytes, content_type: str) -> None:
        ...

    def get_image(self, entry_id: int) -> StoredImage:
        ...

    def delete_image(self, entry_id: int) -> None:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    stored_objects: Dict[str, StoredImage] = field(default_factory=dict)

    def put_image(self, entry_id: int, data: bytes, content_type: str) -> None:
        self.stored_objects[image_key(entry_id)] = StoredImage(data=data, content_type=content_type)

    def get_image(self, entry_id: int) -> StoredImage:
        stored = self.stored_objects.get(image_key(entry_id))
        if stored is None:
            raise ImageNotFoundError("Image not found")
        return stored

    def delete_image(self, entry_id: int) -> None:
        self.stored_objects.pop(image_key(entry_id), None)


@dataclass
class S3StorageClient:
    """S3 storage client. Uploads overwrite any image already stored for the entry."""

    bucket: str
    region: str
    endpoint: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    def __post_init__(self):
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
        )

    def put_image(self, entry_id: int, data: bytes, content_type: str) -> None:
        key = image_key(entry_id)
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {key} to {self.bucket}: {e}", exc_info=True)
            raise StorageError("Failed to store image")

    def get_image(self, entry_id: int) -> StoredImage:
        key = image_key(entry_id)
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=key)
            return StoredImage(
                data=response["Body"].read(),
                content_type=response.get("ContentType") or "application/octet-stream",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in MISSING_KEY_CODES:
                raise ImageNotFoundError("Image not found")
            logger.error(f"Failed to download {key} from {self.bucket}: {e}", exc_info=True)
            raise StorageError("Failed to load image")
        except BotoCoreError as e:
            logger.error(f"Failed to download {key} from {self.bucket}: {e}", exc_info=True)
            raise StorageError("Failed to load image")

    def delete_image(self, entry_id: int) -> None:
        """Remove the entry's image. Deleting a missing key succeeds on S3."""
        key = image_key(entry_id)
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete {key} from {self.bucket}: {e}", exc_info=True)
            raise StorageError("Failed to delete image")


def delete_images(storage: StorageClient, entry_ids: Iterable[int]) -> None:
    """Best-effort removal of entry images; failures are logged and skipped."""
    for entry_id in entry_ids:
        try:
            storage.delete_image(entry_id)
        except StorageError as e:
            logger.warning(f"Leaving image of deleted entry {entry_id} behind: {e.message}")


_storage_client: Optional[StorageClient] = None


def get_storage_client() -> StorageClient:
    """Return a singleton storage client; in-memory when no bucket is configured."""
    global _storage_client
    if _storage_client:
        return _storage_client

    if not settings.S3_BUCKET:
        logger.warning("S3_BUCKET not configured. Entry images are kept in memory.")
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = S3StorageClient(
            bucket=settings.S3_BUCKET,
            region=settings.S3_REGION,
            endpoint=settings.S3_ENDPOINT_URL,
            access_key_id=settings.AWS_ACCESS_KEY_ID,
            secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        )
    return _storage_client
