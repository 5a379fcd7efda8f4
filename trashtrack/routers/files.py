"""
File Upload Router

Stores before/after photos of waste sites.
The returned URL is what reports carry as image_url / resolved_image_url.
Stored names and served content types come from the decoded image format,
never from the client's filename or declared type.
"""

from pathlib import Path
from typing import Any, Dict, Optional
import io
import uuid

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse
from PIL import Image
from starlette.concurrency import run_in_threadpool

from trashtrack.config import settings

router = APIRouter(prefix="/api", tags=["files"])

# Pillow format -> (stored extension, served media type)
IMAGE_FORMATS = {
    "JPEG": (".jpg", "image/jpeg"),
    "PNG": (".png", "image/png"),
    "GIF": (".gif", "image/gif"),
    "WEBP": (".webp", "image/webp"),
    "BMP": (".bmp", "image/bmp"),
    "TIFF": (".tiff", "image/tiff"),
}
MEDIA_TYPES = {ext: media_type for ext, media_type in IMAGE_FORMATS.values()}


def _sniff_image_format(data: bytes) -> Optional[str]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except Exception:
        return None
    return fmt


def _upload_dir() -> Path:
    path = Path(settings.upload_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _safe_resolve(filename: str) -> Path:
    upload_dir = _upload_dir().resolve()
    resolved = (upload_dir / filename).resolve()
    if resolved.parent != upload_dir:
        raise HTTPException(status_code=400, detail="Invalid filename")
    return resolved


def _build_public_url(request: Request, filename: str) -> str:
    base = settings.media_base_url.strip().rstrip("/")
    if base:
        return f"{base}/api/upload/{filename}"
    return str(request.base_url).rstrip("/") + f"/api/upload/{filename}"


@router.post("/upload")
async def upload_file(request: Request, file: UploadFile = File(...)) -> Dict[str, Any]:
    """
    Upload a waste photo.

    Returns:
        Dict with 'url' key to use as the report's image reference
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}. Only images are allowed.",
        )

    data = await file.read()
    fmt = await run_in_threadpool(_sniff_image_format, data)
    if fmt not in IMAGE_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Uploaded file is not a supported image (JPEG, PNG, GIF, WebP, BMP or TIFF).",
        )
    file_extension, media_type = IMAGE_FORMATS[fmt]
    unique_filename = f"{uuid.uuid4()}{file_extension}"
    file_path = _upload_dir() / unique_filename

    try:
        file_path.write_bytes(data)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"File upload failed: {str(e)}")

    public_url = _build_public_url(request, unique_filename)
    return {
        "url": public_url,
        "filename": unique_filename,
        "content_type": media_type,
        "size": len(data),
    }


@router.get("/upload/{filename}")
async def get_file(filename: str) -> FileResponse:
    """Serve an uploaded photo over HTTP."""
    file_path = _safe_resolve(filename)
    media_type = MEDIA_TYPES.get(file_path.suffix.lower())
    if media_type is None or not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(
        str(file_path),
        media_type=media_type,
        headers={"X-Content-Type-Options": "nosniff"},
    )


@router.delete("/upload/{filename}")
async def delete_file(filename: str) -> Dict[str, str]:
    file_path = _safe_resolve(filename)
    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")
    try:
        file_path.unlink()
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"File deletion failed: {str(e)}")
    return {"status": "deleted", "filename": filename}
