"""YOLO11 wrapper for object detection."""

import logging
from pathlib import Path

from PIL import Image
from ultralytics import YOLO

from photo_curator.config import YOLO_MODEL_PATH
from photo_curator.errors import ConfigurationError, InferenceError
from photo_curator.inference.providers import torch_device
from photo_curator.models import ObjectDetection

logger = logging.getLogger(__name__)


class YOLODetector:
    """Detect objects using YOLO11 (COCO 80 classes)."""

    def __init__(
        self,
        model_path: str | Path | None = None,
        use_accelerator: bool = False,
        imgsz: int = 640,
    ) -> None:
        path = Path(model_path or YOLO_MODEL_PATH)
        if not path.exists():
            raise ConfigurationError(f"YOLO model not found: {path}", model_path=path)
        try:
            self.model = YOLO(str(path))
        except Exception as e:
            raise ConfigurationError(f"Failed to load YOLO model {path}: {e}", model_path=path) from e

        self.imgsz = imgsz
        self.model_name = path.stem
        self.device = self._init_device(use_accelerator)
        logger.info("Loaded %s on %s", self.model_name, self.device)

    def _init_device(self, use_accelerator: bool) -> str:
        """Move the model to the accelerator, falling back to CPU if that fails."""
        device = torch_device(use_accelerator)
        if device == "cpu":
            return device
        try:
            self.model.to(device)
        except Exception as e:
            logger.warning("Could not move %s to %s (%s); using CPU", self.model_name, device, e)
            return "cpu"
        return device

    def detect(self, image: Image.Image, confidence: float, iou: float) -> list[ObjectDetection]:
        """Detect objects in a decoded image.

        Args:
            image: Decoded RGB image.
            confidence: Minimum box confidence kept by the model.
            iou: IoU threshold for non-maximum suppression.

        Returns:
            List of ObjectDetection objects, one per detected object.

        Raises:
            InferenceError: If the model raises during prediction.
        """
        try:
            results = self.model(
                image,
                imgsz=self.imgsz,
                conf=confidence,
                iou=iou,
                device=self.device,
                verbose=False,
            )
        except Exception as e:
            raise InferenceError(f"YOLO inference failed: {e}") from e
        return results_to_detections(results)


def results_to_detections(results) -> list[ObjectDetection]:
    """Flatten ultralytics ``Results`` into ObjectDetection records."""
    detections: list[ObjectDetection] = []
    for r in results:
        if r.boxes is None:
            continue
        for box in r.boxes:
            x1, y1, x2, y2 = [float(v) for v in box.xyxy[0]]
            detections.append(
                ObjectDetection(
                    label=r.names[int(box.cls)],
                    confidence=float(box.conf),
                    bbox=(x1, y1, x2, y2),
                )
            )
    return detections
