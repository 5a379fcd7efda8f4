import asyncio
import inspect
import io
import json
import time
from types import SimpleNamespace

import pytest
from PIL import Image

from trashtrack.config import settings
from trashtrack.errors import ClassificationFailure
from trashtrack.models.report import WasteCategory
from trashtrack.services import gemini

VALID_RESPONSE = {
    "category": "plastic",
    "description": "Pile of plastic bottles and wrappers on the pavement.",
    "severity": 3,
    "estimatedWeightKg": 4.5,
    "safetyWarning": "Broken glass mixed in.",
}


class FakeModel:
    def __init__(self, text=None, error=None, delay=0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    def generate_content(self, contents, generation_config=None):
        self.calls.append((contents, generation_config))
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def _use(monkeypatch, model):
    monkeypatch.setattr(gemini, "_get_client", lambda: model)
    return model


def _assert_default(result):
    assert result.category == WasteCategory.OTHER
    assert result.description == "Could not analyze image automatically."
    assert result.severity == 1
    assert result.estimated_weight_kg == 0
    assert result.safety_warning == ""


def test_classify_success(monkeypatch, jpeg_bytes):
    model = _use(monkeypatch, FakeModel(text=json.dumps(VALID_RESPONSE)))

    result = asyncio.run(gemini.classify(jpeg_bytes))

    assert result.category == WasteCategory.PLASTIC
    assert 1 <= result.severity <= 5
    assert result.estimated_weight_kg == 4.5
    assert result.safety_warning == "Broken glass mixed in."

    contents, config = model.calls[0]
    assert contents[0]["mime_type"] == "image/jpeg"
    assert contents[0]["data"][:2] == b"\xff\xd8"
    assert contents[1] == gemini.CLASSIFY_PROMPT
    assert config["response_mime_type"] == "application/json"
    assert config["response_schema"]["properties"]["category"]["enum"] == [c.value for c in WasteCategory]


def test_classify_accepts_png_and_bounds_size(monkeypatch):
    model = _use(monkeypatch, FakeModel(text=json.dumps(VALID_RESPONSE)))
    monkeypatch.setattr(settings, "classify_max_image_side", 100)
    buf = io.BytesIO()
    Image.new("RGBA", (400, 200), (0, 0, 255, 128)).save(buf, format="PNG")

    asyncio.run(gemini.classify(buf.getvalue()))

    sent = Image.open(io.BytesIO(model.calls[0][0][0]["data"]))
    assert sent.format == "JPEG"
    assert max(sent.size) == 100


def test_classify_handles_code_fenced_json(monkeypatch, jpeg_bytes):
    fenced = "```json\n" + json.dumps(VALID_RESPONSE) + "\n```"
    _use(monkeypatch, FakeModel(text=fenced))

    result = asyncio.run(gemini.classify(jpeg_bytes))

    assert result.category == WasteCategory.PLASTIC


def test_classify_missing_safety_warning_defaults_to_empty(monkeypatch, jpeg_bytes):
    payload = {k: v for k, v in VALID_RESPONSE.items() if k != "safetyWarning"}
    _use(monkeypatch, FakeModel(text=json.dumps(payload)))

    result = asyncio.run(gemini.classify(jpeg_bytes))

    assert result.safety_warning == ""


def test_classify_falls_back_on_service_error(monkeypatch, jpeg_bytes):
    _use(monkeypatch, FakeModel(error=ConnectionError("network down")))
    _assert_default(asyncio.run(gemini.classify(jpeg_bytes)))


def test_classify_falls_back_without_client(no_classifier, jpeg_bytes):
    _assert_default(asyncio.run(gemini.classify(jpeg_bytes)))


@pytest.mark.parametrize("text", [
    "",
    "not json at all",
    json.dumps(["plastic"]),
    json.dumps({**VALID_RESPONSE, "category": "metal"}),
    json.dumps({**VALID_RESPONSE, "severity": 9}),
    json.dumps({k: v for k, v in VALID_RESPONSE.items() if k != "estimatedWeightKg"}),
])
def test_classify_falls_back_on_nonconforming_response(monkeypatch, jpeg_bytes, text):
    _use(monkeypatch, FakeModel(text=text))
    _assert_default(asyncio.run(gemini.classify(jpeg_bytes)))


def test_classify_falls_back_on_undecodable_image(monkeypatch):
    model = _use(monkeypatch, FakeModel(text=json.dumps(VALID_RESPONSE)))
    _assert_default(asyncio.run(gemini.classify(b"definitely not an image")))
    assert model.calls == []


def test_classify_falls_back_on_timeout(monkeypatch, jpeg_bytes):
    _use(monkeypatch, FakeModel(text=json.dumps(VALID_RESPONSE), delay=0.5))
    monkeypatch.setattr(settings, "classify_timeout_seconds", 0.05)
    _assert_default(asyncio.run(gemini.classify(jpeg_bytes)))


def test_default_result_is_fresh_each_time():
    first = gemini.default_result()
    first.severity = 5
    assert gemini.default_result().severity == 1


def test_parse_classification_caps_description():
    text = json.dumps({**VALID_RESPONSE, "description": "y" * 500})
    assert len(gemini.parse_classification(text).description) == 200


def test_prepare_image_rejects_empty():
    with pytest.raises(ClassificationFailure):
        gemini.prepare_image(b"")


def test_image_preparation_runs_off_the_event_loop(monkeypatch):
    _use(monkeypatch, FakeModel(text=json.dumps(VALID_RESPONSE)))

    def slow_prepare(image, max_side=1600):
        time.sleep(0.3)
        return b"\xff\xd8jpeg"

    monkeypatch.setattr(gemini, "prepare_image", slow_prepare)

    async def run():
        loop = asyncio.get_running_loop()
        done = asyncio.Event()
        gaps = []

        async def ticker():
            last = loop.time()
            while not done.is_set():
                await asyncio.sleep(0.01)
                now = loop.time()
                gaps.append(now - last)
                last = now

        tick = asyncio.create_task(ticker())
        result = await gemini.classify(b"raw photo bytes")
        done.set()
        await tick
        return result, max(gaps)

    result, longest_gap = asyncio.run(run())

    assert result.category == WasteCategory.PLASTIC
    assert longest_gap < 0.2


def test_classify_takes_only_the_image():
    assert list(inspect.signature(gemini.classify).parameters) == ["image"]
    assert asyncio.iscoroutinefunction(gemini.classify)
