"""ONNX Runtime wrapper for the InsightFace genderage model.

Preprocessing feeds the model an NCHW float32 tensor in RGB order scaled to
[0, 1]. Other exports of the model may expect BGR input or mean/std
normalization; adjust ``preprocess`` when swapping the model file.

Output layouts are not standardized across exports either, so
``interpret_outputs`` sniffs each output by shape:

* ``(1, 2)`` is treated as gender logits; index 1 of the softmax is the
  female probability.
* a single element is treated as the age.
* any other ``(1, N)`` output falls back to its first element as the age.

Nothing matching, or an output that is not numeric at all (e.g. a ZipMap
list of dicts), leaves both values at zero.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import onnxruntime as ort
from PIL import Image

from photo_curator.config import GENDERAGE_INPUT_SIZE, GENDERAGE_MODEL_PATH
from photo_curator.errors import ConfigurationError, InferenceError
from photo_curator.inference.providers import CPU_PROVIDER, onnx_providers
from photo_curator.models import AttributeEstimate

logger = logging.getLogger(__name__)

FEMALE_INDEX = 1


class GenderAgePredictor:
    """Estimate female probability and age for a face crop."""

    def __init__(
        self,
        model_path: str | Path | None = None,
        use_accelerator: bool = False,
        input_size: tuple[int, int] = GENDERAGE_INPUT_SIZE,
        session: ort.InferenceSession | None = None,
    ) -> None:
        self.input_size = input_size
        self.session = session or _create_session(
            Path(model_path or GENDERAGE_MODEL_PATH), use_accelerator
        )
        self.input_name = self.session.get_inputs()[0].name

    def predict(self, face_crop: Image.Image) -> AttributeEstimate:
        """Run the model on one face crop.

        Raises:
            InferenceError: If the ONNX session raises.
        """
        tensor = preprocess(face_crop, self.input_size)
        try:
            outputs = self.session.run(None, {self.input_name: tensor})
        except Exception as e:
            raise InferenceError(f"genderage inference failed: {e}") from e
        return interpret_outputs(outputs)


def _create_session(path: Path, use_accelerator: bool) -> ort.InferenceSession:
    """Open an inference session, retrying on CPU if the accelerator fails."""
    if not path.exists():
        raise ConfigurationError(f"genderage model not found: {path}", model_path=path)

    providers = onnx_providers(use_accelerator)
    try:
        session = ort.InferenceSession(str(path), providers=providers)
    except Exception as e:
        if providers == [CPU_PROVIDER]:
            raise ConfigurationError(f"Failed to load {path}: {e}", model_path=path) from e
        logger.warning("Accelerated session for %s failed (%s); retrying on CPU", path.name, e)
        try:
            session = ort.InferenceSession(str(path), providers=[CPU_PROVIDER])
        except Exception as cpu_error:
            raise ConfigurationError(
                f"Failed to load {path}: {cpu_error}", model_path=path
            ) from cpu_error

    logger.info("Loaded %s with %s", path.name, session.get_providers())
    return session


def preprocess(image: Image.Image, input_size: tuple[int, int] = GENDERAGE_INPUT_SIZE) -> np.ndarray:
    """Resize and convert a crop into a (1, 3, H, W) float32 tensor in [0, 1]."""
    width, height = input_size
    resized = image.convert("RGB").resize((width, height), Image.Resampling.BILINEAR)
    pixels = np.asarray(resized, dtype=np.float32) / 255.0  # (H, W, 3)
    return np.ascontiguousarray(pixels.transpose(2, 0, 1)[np.newaxis, ...])


def softmax(logits: Sequence[float] | np.ndarray) -> np.ndarray:
    """Numerically stable softmax; all zeros if the exponentials sum to zero."""
    values = np.asarray(logits, dtype=np.float64).reshape(-1)
    if values.size == 0:
        return values
    exps = np.exp(values - values.max())
    total = exps.sum()
    if total == 0:
        return np.zeros_like(exps)
    return exps / total


def interpret_outputs(outputs: Sequence[np.ndarray]) -> AttributeEstimate:
    """Map raw model outputs onto an AttributeEstimate by shape."""
    female_probability = 0.0
    age = 0.0

    for output in outputs:
        try:
            arr = np.asarray(output, dtype=np.float32)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric genderage output of type %s", type(output).__name__)
            continue
        if arr.shape == (1, 2):
            probs = softmax(arr)
            female_probability = float(probs[FEMALE_INDEX])
        elif arr.size == 1:
            age = float(arr.reshape(-1)[0])
        elif arr.ndim == 2 and arr.shape[0] == 1 and arr.shape[1] > 2:
            age = float(arr[0, 0])

    return AttributeEstimate(
        female_probability=min(1.0, max(0.0, female_probability)),
        age=max(0.0, age),
    )
