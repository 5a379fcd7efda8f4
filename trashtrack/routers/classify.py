"""Classify router: POST /api/classify to pre-fill a report draft from a photo."""
from fastapi import APIRouter, File, HTTPException, UploadFile

from trashtrack.models.classification import ClassificationResult
from trashtrack.services import gemini

router = APIRouter(prefix="/api", tags=["classify"])


@router.post("/classify", response_model=ClassificationResult)
async def classify_image(file: UploadFile = File(...)):
    """Best-effort AI suggestion. Falls back to a default result instead of failing."""
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}. Only images are allowed.",
        )
    data = await file.read()
    return await gemini.classify(data)
