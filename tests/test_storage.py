import pytest
from io import BytesIO
from pathlib import Path
from fastapi import UploadFile

from app.core.storage import (
    LocalObjectStore,
    generate_unique_filename,
    validate_file,
    validate_files,
)
from app.services.exceptions import StorageError, ValidationError


class TestStorage:
    """Test object store functionality."""

    def test_generate_unique_filename(self):
        """Test unique filename generation."""
        filename1 = generate_unique_filename("test.PNG")
        filename2 = generate_unique_filename("test.PNG")

        # Should be different
        assert filename1 != filename2

        # Should preserve (lowercased) extension
        assert filename1.endswith(".png")
        assert filename2.endswith(".png")

    def test_validate_file_success(self, upload):
        """Test file validation with valid file."""
        validate_file(upload("test.jpg"))

    def test_validate_file_no_filename(self):
        """Test file validation with no filename."""
        file = UploadFile(filename=None, file=BytesIO(b"content"))

        with pytest.raises(ValidationError) as exc_info:
            validate_file(file)
        assert "No filename provided" in str(exc_info.value)

    def test_validate_file_invalid_extension(self):
        """Test file validation with invalid extension."""
        file = UploadFile(filename="test.txt", file=BytesIO(b"content"))

        with pytest.raises(ValidationError) as exc_info:
            validate_file(file)
        assert "not allowed" in str(exc_info.value)

    def test_validate_file_too_large(self):
        """Files over 4MB are rejected."""
        file = UploadFile(filename="big.png", file=BytesIO(b"\0" * (4 * 1024 * 1024 + 1)))

        with pytest.raises(ValidationError) as exc_info:
            validate_file(file)
        assert "too large" in str(exc_info.value)

    def test_validate_file_exactly_at_limit(self):
        file = UploadFile(filename="edge.png", file=BytesIO(b"\0" * (4 * 1024 * 1024)))
        validate_file(file)

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_validate_files_count_bounds(self, upload, count):
        with pytest.raises(ValidationError):
            validate_files([upload(f"{i}.png") for i in range(count)])

    @pytest.mark.parametrize("count", [2, 3, 4])
    def test_validate_files_accepts_two_to_four(self, upload, count):
        validate_files([upload(f"{i}.png") for i in range(count)])

    @pytest.mark.asyncio
    async def test_upload_saves_files(self, store, upload, png):
        """Uploaded files land on disk and get public urls."""
        content = png()
        stored = await store.upload([upload("a.png", content), upload("b.png")])

        assert len(stored) == 2
        for item in stored:
            assert item["url"] == f"http://testserver/files/{item['id']}"
            assert (Path(store.root) / item["id"]).exists()

        assert (Path(store.root) / stored[0]["id"]).read_bytes() == content

    @pytest.mark.asyncio
    async def test_upload_rejects_non_image(self, store, upload):
        """Content is checked even when the extension looks right."""
        with pytest.raises(ValidationError):
            await store.upload([upload("a.png"), upload("fake.png", b"not an image")])

        # Nothing was written for the rejected batch
        assert not store.root.exists() or list(store.root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_upload_revalidates_count(self, store, upload):
        with pytest.raises(ValidationError):
            await store.upload([upload("only.png")])

    @pytest.mark.asyncio
    async def test_delete_removes_objects(self, store, upload):
        stored = await store.upload([upload("a.png"), upload("b.png")])
        ids = [item["id"] for item in stored]

        assert store.delete(ids) == 2
        assert list(store.root.iterdir()) == []

    def test_delete_ignores_missing_objects(self, store):
        store.ensure_root()
        assert store.delete(["missing.png"]) == 0

    def test_path_for_rejects_traversal(self, store):
        with pytest.raises(StorageError):
            store.path_for("../secrets.txt")

    def test_separate_stores_do_not_share_files(self, tmp_path):
        first = LocalObjectStore(str(tmp_path / "one"), "http://a")
        second = LocalObjectStore(str(tmp_path / "two"), "http://b")
        assert first.path_for("x.png") != second.path_for("x.png")
