"""Shared test fixtures."""

from pathlib import Path
from types import SimpleNamespace

import duckdb
import pytest
from PIL import Image

from photo_curator.curation.schema import ensure_schema
from photo_curator.models import AttributeEstimate, ObjectDetection

# Solid colours stand in for image content; FakeDetector keys its answers on them
PERSON_COLOR = (255, 0, 0)
EMPTY_COLOR = (0, 0, 255)
FAINT_PERSON_COLOR = (0, 255, 0)
BROKEN_COLOR = (255, 255, 0)


@pytest.fixture
def db_conn():
    """In-memory DuckDB connection with schema initialized."""
    conn = duckdb.connect(":memory:")
    ensure_schema(conn)
    yield conn
    conn.close()


def make_image(path: Path, color: tuple[int, int, int], size: tuple[int, int] = (32, 32)) -> Path:
    """Write a solid-colour PNG and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format="PNG")
    return path


def make_corrupt(path: Path) -> Path:
    """Write bytes that no image decoder accepts."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"this is not an image")
    return path


class FakeDetector:
    """Detector returning canned detections keyed on the image's top-left pixel."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, float]] = []
        self.responses = {
            PERSON_COLOR: [ObjectDetection(label="person", confidence=0.91, bbox=(0, 0, 10, 10))],
            FAINT_PERSON_COLOR: [
                ObjectDetection(label="person", confidence=0.30, bbox=(0, 0, 10, 10)),
                ObjectDetection(label="dog", confidence=0.95, bbox=(5, 5, 20, 20)),
            ],
            EMPTY_COLOR: [],
        }

    def detect(self, image, confidence, iou):
        self.calls.append((confidence, iou))
        color = image.getpixel((0, 0))
        if color == BROKEN_COLOR:
            raise RuntimeError("engine exploded")
        return self.responses.get(color, [])


class FakeFaceLocator:
    """Return a fixed number of crops of the whole image."""

    def __init__(self, faces: int = 1, error: Exception | None = None) -> None:
        self.faces = faces
        self.error = error

    def locate(self, image):
        if self.error is not None:
            raise self.error
        return [image.copy() for _ in range(self.faces)]


class FakeAttributePredictor:
    """Return the same estimate for every crop."""

    def __init__(
        self, female_probability: float = 0.0, age: float = 30.0, error: Exception | None = None
    ) -> None:
        self.estimate = AttributeEstimate(female_probability=female_probability, age=age)
        self.error = error
        self.calls = 0

    def predict(self, face_crop):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.estimate


class RecordingObserver:
    """Collect progress events and the final summary."""

    def __init__(self) -> None:
        self.progress = []
        self.summaries = []

    def on_progress(self, progress) -> None:
        self.progress.append(progress)

    def on_finished(self, summary) -> None:
        self.summaries.append(summary)


class FakeSession:
    """Minimal stand-in for onnxruntime.InferenceSession."""

    def __init__(self, outputs=None, error: Exception | None = None) -> None:
        self.outputs = outputs or []
        self.error = error
        self.feeds = []

    def get_inputs(self):
        return [SimpleNamespace(name="data", shape=[1, 3, 112, 112])]

    def run(self, output_names, feeds):
        self.feeds.append(feeds)
        if self.error is not None:
            raise self.error
        return self.outputs
