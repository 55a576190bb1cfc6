import logging
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Sequence
from uuid import uuid4

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from .config import settings
from ..services.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)


def get_file_extension(filename: str) -> str:
    """Get file extension in lowercase."""
    return Path(filename).suffix.lower()


def get_file_size(file: UploadFile) -> int:
    """Size of an uploaded file in bytes, leaving the stream at the start."""
    file.file.seek(0, 2)  # Seek to end
    size = file.file.tell()
    file.file.seek(0)  # Reset to beginning
    return size


def generate_unique_filename(original_filename: str) -> str:
    """Generate a unique filename while preserving the extension."""
    extension = get_file_extension(original_filename)
    unique_id = uuid4().hex
    return f"{unique_id}{extension}"


def validate_file(file: UploadFile) -> None:
    """Validate a single uploaded file's name and size."""
    if not file.filename:
        raise ValidationError("No filename provided")

    extension = get_file_extension(file.filename)
    if extension not in settings.ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"File type {extension} not allowed. Allowed types: {', '.join(sorted(settings.ALLOWED_EXTENSIONS))}"
        )

    if get_file_size(file) > settings.MAX_FILE_SIZE:
        raise ValidationError(
            f"File too large. Maximum size: {settings.MAX_FILE_SIZE / (1024*1024):.1f}MB"
        )


def validate_files(files: Sequence[UploadFile]) -> None:
    """Validate an upload batch: count bounds first, then every file."""
    if len(files) < settings.MIN_IMAGES:
        raise ValidationError(f"At least {settings.MIN_IMAGES} files are required")
    if len(files) > settings.MAX_IMAGES:
        raise ValidationError(f"Maximum {settings.MAX_IMAGES} files are allowed")

    for file in files:
        validate_file(file)


def verify_image_bytes(data: bytes, filename: str) -> None:
    """Reject payloads Pillow cannot identify as an image."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValidationError(f"{filename} is not a valid image") from e


class LocalObjectStore:
    """Object store keeping assets on local disk, served under /files/{key}."""

    def __init__(self, root: str, public_url: str):
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    def ensure_root(self) -> Path:
        """Ensure the upload directory exists."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def url_for(self, key: str) -> str:
        return f"{self.public_url}/files/{key}"

    def path_for(self, key: str) -> Path:
        # Keys are generated by us; refuse anything that could escape the root
        if Path(key).name != key:
            raise StorageError(f"Invalid object key: {key}")
        return self.root / key

    async def upload(self, files: Sequence[UploadFile]) -> List[Dict[str, str]]:
        """
        Store a batch of images.

        The batch is validated again here regardless of what the caller
        checked. If any write fails, files already written in this batch
        are removed before the error is raised.

        Returns:
            list of {"id": key, "url": public url}, in input order
        """
        validate_files(files)
        upload_dir = self.ensure_root()

        payloads = []
        for file in files:
            data = await file.read()
            verify_image_bytes(data, file.filename)
            payloads.append((generate_unique_filename(file.filename), data))

        stored: List[Dict[str, str]] = []
        try:
            for key, data in payloads:
                (upload_dir / key).write_bytes(data)
                stored.append({"id": key, "url": self.url_for(key)})
        except OSError as e:
            self.delete([item["id"] for item in stored])
            raise StorageError(f"Failed to save file: {e}") from e

        logger.info(f"Stored {len(stored)} objects in {upload_dir}")
        return stored

    def delete(self, ids: Sequence[str]) -> int:
        """Delete objects by key. Missing keys are ignored; I/O errors raise StorageError."""
        deleted = 0
        for key in ids:
            path = self.path_for(key)
            try:
                path.unlink()
                deleted += 1
            except FileNotFoundError:
                logger.warning(f"Object {key} already absent from storage")
            except OSError as e:
                raise StorageError(f"Failed to delete object {key}: {e}") from e
        return deleted


def get_object_store() -> LocalObjectStore:
    """FastAPI dependency returning the configured object store."""
    return LocalObjectStore(settings.UPLOAD_DIR, settings.PUBLIC_URL)
