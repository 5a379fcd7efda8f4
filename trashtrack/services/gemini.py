"""Gemini API: waste photo classification with a safe fallback."""
import asyncio
import io
import json
import logging
from typing import Any

from PIL import Image, ImageOps
from pydantic import ValidationError as PydanticValidationError

from trashtrack.config import settings
from trashtrack.errors import ClassificationFailure
from trashtrack.models.classification import ClassificationResult
from trashtrack.models.report import WasteCategory

logger = logging.getLogger(__name__)

_client = None


def _get_client():
    global _client
    if _client is None and settings.gemini_api_key:
        try:
            import google.generativeai as genai

            genai.configure(api_key=settings.gemini_api_key)
            _client = genai.GenerativeModel(settings.gemini_model)
        except Exception as e:
            logger.warning("Gemini client init failed: %s", e)
    return _client


def is_available() -> bool:
    return _get_client() is not None


CLASSIFY_PROMPT = """Analyze this image of waste/garbage. Identify the category, describe it briefly (under 200 characters), estimate severity (1-5 where 5 is dangerous/blocking traffic), estimate weight in kilograms, and provide any safety warnings.
Category must be one of: roadside, bin-overflow, plastic, wet, construction, other.
Return strictly JSON."""

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "category": {
            "type": "STRING",
            "format": "enum",
            "enum": [c.value for c in WasteCategory],
        },
        "description": {"type": "STRING"},
        "severity": {"type": "INTEGER"},
        "estimatedWeightKg": {"type": "NUMBER"},
        "safetyWarning": {"type": "STRING"},
    },
    "required": ["category", "description", "severity", "estimatedWeightKg"],
}

FALLBACK_DESCRIPTION = "Could not analyze image automatically."


def default_result() -> ClassificationResult:
    """Result used whenever the classifier cannot produce a valid answer."""
    return ClassificationResult(
        category=WasteCategory.OTHER,
        description=FALLBACK_DESCRIPTION,
        severity=1,
        estimated_weight_kg=0,
        safety_warning="",
    )


async def classify(image: bytes) -> ClassificationResult:
    """Suggest category, description and severity for a waste photo.

    Never raises on service problems: missing key, network errors, timeouts
    and non-conforming responses all yield `default_result()` so that report
    creation can always continue with manual entry.
    """
    timeout = settings.classify_timeout_seconds
    try:
        return await asyncio.wait_for(_classify(image), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Gemini classify timed out after %.1fs", timeout)
    except ClassificationFailure as e:
        logger.warning("Gemini classify failed: %s", e)
    except Exception as e:
        logger.warning("Gemini classify failed unexpectedly: %s", e)
    return default_result()


async def _classify(image: bytes) -> ClassificationResult:
    client = _get_client()
    if not client:
        raise ClassificationFailure("Gemini client unavailable (GEMINI_API_KEY not set)")
    # Decoding large photos is CPU-bound; keep it off the event loop.
    loop = asyncio.get_event_loop()
    jpeg = await loop.run_in_executor(
        None, prepare_image, image, settings.classify_max_image_side
    )
    text = await _generate_content(
        client,
        [{"mime_type": "image/jpeg", "data": jpeg}, CLASSIFY_PROMPT],
    )
    return parse_classification(text)


def prepare_image(image: bytes, max_side: int = 1600) -> bytes:
    """Decode any common photo encoding and re-encode as a bounded RGB JPEG."""
    if not image:
        raise ClassificationFailure("Empty image")
    try:
        with Image.open(io.BytesIO(image)) as img:
            img.load()
            normalized = ImageOps.exif_transpose(img).convert("RGB")
        normalized.thumbnail((max_side, max_side))
        buf = io.BytesIO()
        normalized.save(buf, format="JPEG", quality=85)
    except Exception as e:
        raise ClassificationFailure(f"Could not decode image: {e}") from e
    return buf.getvalue()


async def _generate_content(model: Any, contents: list[Any]) -> str:
    """Run generation. Gemini SDK is sync, so we run in executor."""

    def _sync_gen():
        resp = model.generate_content(
            contents,
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": RESPONSE_SCHEMA,
            },
        )
        return resp.text if resp else None

    loop = asyncio.get_event_loop()
    try:
        text = await loop.run_in_executor(None, _sync_gen)
    except Exception as e:
        raise ClassificationFailure(f"Gemini generate_content error: {e}") from e
    if not text:
        raise ClassificationFailure("No response text from Gemini")
    return text


def parse_classification(text: str) -> ClassificationResult:
    """Parse and validate the model's JSON, handling markdown code blocks."""
    text = (text or "").strip()
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ClassificationFailure(f"Response is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise ClassificationFailure("Response is not a JSON object")
    try:
        return ClassificationResult.model_validate(data)
    except PydanticValidationError as e:
        raise ClassificationFailure(f"Response does not match schema: {e}") from e
