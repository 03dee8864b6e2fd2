"""Startup wiring for the inference models."""

import logging
from dataclasses import dataclass
from pathlib import Path

from photo_curator.errors import ConfigurationError
from photo_curator.models import RunConfig

logger = logging.getLogger(__name__)


@dataclass
class LoadedModels:
    """Model instances shared read-only by a whole run."""

    detector: object
    attribute_predictor: object | None = None
    face_locator: object | None = None


def load_models(
    config: RunConfig,
    yolo_model_path: str | Path | None = None,
    genderage_model_path: str | Path | None = None,
) -> LoadedModels:
    """Load the detector and, when the run needs them, the face models.

    A detector that fails to load raises ConfigurationError. Face model
    failures are logged and leave the run detection-only.
    """
    from photo_curator.inference.yolo_detector import YOLODetector

    detector = YOLODetector(model_path=yolo_model_path, use_accelerator=config.use_accelerator)

    if not config.only_keep_female:
        return LoadedModels(detector=detector)

    attribute_predictor = None
    face_locator = None
    try:
        from photo_curator.inference.genderage import GenderAgePredictor

        attribute_predictor = GenderAgePredictor(
            model_path=genderage_model_path, use_accelerator=config.use_accelerator
        )
    except ConfigurationError as e:
        logger.warning("Attribute predictor unavailable, running detection-only: %s", e)

    if attribute_predictor is not None:
        try:
            from photo_curator.inference.face_locator import FaceLocator

            face_locator = FaceLocator(use_accelerator=config.use_accelerator)
        except ConfigurationError as e:
            logger.warning("Face locator unavailable, running detection-only: %s", e)
            attribute_predictor = None

    return LoadedModels(
        detector=detector,
        attribute_predictor=attribute_predictor,
        face_locator=face_locator,
    )
