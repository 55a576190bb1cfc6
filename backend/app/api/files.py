import mimetypes

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from ..core.storage import LocalObjectStore, get_object_store
from ..services.exceptions import StorageError

router = APIRouter()


@router.get("/{key}")
async def get_file(key: str, store: LocalObjectStore = Depends(get_object_store)):
    """Serve a stored image by its object key."""
    try:
        path = store.path_for(key)
    except StorageError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    if not path.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    return FileResponse(
        path=str(path),
        media_type=mimetypes.guess_type(path.name)[0] or "application/octet-stream",
    )
