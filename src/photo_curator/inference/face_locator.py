"""InsightFace wrapper that locates faces and returns them as crops."""

import logging

import cv2
import numpy as np
from insightface.app import FaceAnalysis
from PIL import Image

from photo_curator.config import FACE_DET_SIZE, INSIGHTFACE_MODEL_NAME
from photo_curator.errors import ConfigurationError, InferenceError
from photo_curator.inference.providers import CPU_PROVIDER, onnx_providers

logger = logging.getLogger(__name__)


class FaceLocator:
    """Detect faces with InsightFace (detection module only)."""

    def __init__(
        self,
        model_name: str = INSIGHTFACE_MODEL_NAME,
        use_accelerator: bool = False,
        min_score: float = 0.5,
    ) -> None:
        self.model_name = model_name
        self.min_score = min_score
        providers = onnx_providers(use_accelerator)
        try:
            self.app = self._prepare(providers)
        except Exception as e:
            if providers == [CPU_PROVIDER]:
                raise ConfigurationError(
                    f"Failed to load InsightFace {model_name}: {e}", model_path=model_name
                ) from e
            logger.warning("Accelerated InsightFace init failed (%s); retrying on CPU", e)
            try:
                self.app = self._prepare([CPU_PROVIDER])
            except Exception as cpu_error:
                raise ConfigurationError(
                    f"Failed to load InsightFace {model_name}: {cpu_error}",
                    model_path=model_name,
                ) from cpu_error

    def _prepare(self, providers: list[str]) -> FaceAnalysis:
        app = FaceAnalysis(name=self.model_name, allowed_modules=["detection"], providers=providers)
        ctx_id = 0 if providers[0] != CPU_PROVIDER else -1
        app.prepare(ctx_id=ctx_id, det_size=FACE_DET_SIZE)
        return app

    def locate(self, image: Image.Image) -> list[Image.Image]:
        """Return one crop per face scoring at least ``min_score``.

        Raises:
            InferenceError: If InsightFace raises.
        """
        bgr = cv2.cvtColor(np.asarray(image.convert("RGB")), cv2.COLOR_RGB2BGR)
        try:
            faces = self.app.get(bgr)
        except Exception as e:
            raise InferenceError(f"face detection failed: {e}") from e

        crops: list[Image.Image] = []
        for face in faces:
            if float(face.det_score) < self.min_score:
                continue
            box = crop_box(face.bbox, image.size)
            if box is not None:
                crops.append(image.crop(box))
        return crops


def crop_box(
    bbox: np.ndarray | list[float], image_size: tuple[int, int]
) -> tuple[int, int, int, int] | None:
    """Clamp an (x1, y1, x2, y2) face box to the image; None if it is empty."""
    width, height = image_size
    x1, y1, x2, y2 = [float(v) for v in bbox]
    left = max(0, int(round(x1)))
    top = max(0, int(round(y1)))
    right = min(width, int(round(x2)))
    bottom = min(height, int(round(y2)))
    if right <= left or bottom <= top:
        return None
    return left, top, right, bottom
