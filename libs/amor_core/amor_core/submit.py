import logging
from typing import List, Protocol, Sequence, Tuple

import httpx

from .client import ApiError

logger = logging.getLogger(__name__)

MIN_FILES = 2
MAX_FILES = 4
MAX_FILE_SIZE = 4 * 1024 * 1024


class SubmissionError(ValueError):
    """Form input rejected before anything is sent."""


class GroupCreator(Protocol):
    async def create_group(
        self, name: str, tags: Sequence[str], files: Sequence[Tuple[str, bytes]]
    ) -> bool: ...


def validate_submission(
    name: str,
    tags: Sequence[str],
    files: Sequence[Tuple[str, bytes]],
) -> Tuple[str, List[str]]:
    """Check the create-group form; returns the cleaned name and tags."""
    name = (name or "").strip()
    if not name:
        raise SubmissionError("a title is required")

    if any(not isinstance(tag, str) for tag in tags):
        raise SubmissionError("tags must be text")
    cleaned_tags = [tag.strip() for tag in tags if tag.strip()]

    if len(files) < MIN_FILES:
        raise SubmissionError(f"at least {MIN_FILES} files is required")
    if len(files) > MAX_FILES:
        raise SubmissionError(f"maximum {MAX_FILES} files are allowed")
    for filename, content in files:
        if len(content) > MAX_FILE_SIZE:
            raise SubmissionError(f"{filename}: file size must be at most 4MB")

    return name, cleaned_tags


class GroupSubmitter:
    """Create-group form submission; a second submit while one is running is refused."""

    def __init__(self, api: GroupCreator):
        self._api = api
        self.submitting = False

    async def submit(
        self,
        name: str,
        tags: Sequence[str],
        files: Sequence[Tuple[str, bytes]],
    ) -> bool:
        name, cleaned_tags = validate_submission(name, tags, files)

        if self.submitting:
            logger.info("Create-group submission already in progress")
            return False

        self.submitting = True
        try:
            return await self._api.create_group(name, cleaned_tags, files)
        except (httpx.HTTPError, ApiError) as e:
            logger.warning(f"Failed to create group '{name}': {e}")
            return False
        finally:
            self.submitting = False
