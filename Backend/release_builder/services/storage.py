import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from release_builder.core.config import settings
from release_builder.services.validation import file_extension

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an object cannot be written."""


@dataclass(frozen=True)
class StoredObject:
    bucket: str
    path: str
    public_url: str


class LocalStorage:
    """
    Object storage on the local filesystem, one directory per bucket.

    Objects are served by the app under STORAGE_PUBLIC_URL. Uploads never
    overwrite an existing object.
    """
    def __init__(self, root: str, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _object_path(self, bucket: str, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"Invalid object path '{path}'")
        return self.root / bucket / Path(*relative.parts)

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str | None = None) -> StoredObject:
        target = self._object_path(bucket, path)
        if target.exists():
            raise StorageError(f"Object {bucket}/{path} already exists")

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        await asyncio.to_thread(_write)
        logger.info(f"Stored {len(data)} bytes at {bucket}/{path} ({content_type or 'unknown type'})")
        return StoredObject(bucket=bucket, path=path, public_url=self.get_public_url(bucket, path))

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{path}"


def object_name(filename: str, prefix: str = "") -> str:
    """Random object name that keeps the original extension, e.g. artwork/<uuid>.png"""
    name = f"{uuid.uuid4()}{file_extension(filename)}"
    return f"{prefix.strip('/')}/{name}" if prefix else name


def get_storage() -> LocalStorage:
    return LocalStorage(settings.STORAGE_ROOT, settings.STORAGE_PUBLIC_URL)
