"""Batch curation loop: detect, decide, delete, report.

Each file is processed on its own: a corrupt image, a model failure or a
locked file produces a decision for that file and the loop moves on. Only
the summary returned at the end aggregates across files.
"""

import logging
import threading
import time
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Protocol

from PIL import Image, UnidentifiedImageError

from photo_curator.config import PACE_SECONDS
from photo_curator.curation.enumerator import enumerate_images
from photo_curator.decision.normalizer import normalize_detections
from photo_curator.decision.presence import has_person
from photo_curator.errors import DecodeError, DeletionError, InferenceError
from photo_curator.models import (
    AttributeEstimate,
    CurationDecision,
    CuratorState,
    DecisionStatus,
    RunConfig,
    RunProgress,
    RunSummary,
)

logger = logging.getLogger(__name__)


class Detector(Protocol):
    def detect(self, image: Image.Image, confidence: float, iou: float) -> Iterable[Any]: ...


class AttributePredictor(Protocol):
    def predict(self, face_crop: Image.Image) -> AttributeEstimate: ...


class FaceLocator(Protocol):
    def locate(self, image: Image.Image) -> list[Image.Image]: ...


class CurationObserver(Protocol):
    def on_progress(self, progress: RunProgress) -> None: ...

    def on_finished(self, summary: RunSummary) -> None: ...


class BatchCurator:
    """Run the detector over a set of images and apply the deletion policy."""

    def __init__(
        self,
        detector: Detector,
        config: RunConfig | None = None,
        attribute_predictor: AttributePredictor | None = None,
        face_locator: FaceLocator | None = None,
        observer: CurationObserver | None = None,
        pace_seconds: float = PACE_SECONDS,
    ) -> None:
        self.detector = detector
        self.config = config or RunConfig()
        self.attribute_predictor = attribute_predictor
        self.face_locator = face_locator
        self.observer = observer
        self.pace_seconds = pace_seconds
        self.state = CuratorState.IDLE

        self.female_policy_active = (
            self.config.only_keep_female
            and attribute_predictor is not None
            and face_locator is not None
        )
        if self.config.only_keep_female and not self.female_policy_active:
            logger.warning("only_keep_female requested without face models; ignoring it")

    def run(self, root: str | Path, cancel_event: threading.Event | None = None) -> RunSummary:
        """Enumerate images under ``root`` and curate them."""
        self.state = CuratorState.ENUMERATING
        files = enumerate_images(root, recursive=self.config.include_subfolders)
        if not files:
            logger.info("No image files found under %s", root)
        return self.run_files(files, cancel_event=cancel_event)

    def run_files(
        self,
        files: Sequence[str | Path],
        cancel_event: threading.Event | None = None,
    ) -> RunSummary:
        """Curate an explicit list of files, strictly in order.

        Args:
            files: Candidate image paths.
            cancel_event: Checked before each file; when set, the run stops and
                the decisions made so far are returned.

        Returns:
            RunSummary covering every file that was reached.
        """
        paths = [Path(f) for f in files]
        total = len(paths)
        summary = RunSummary(total_files=total)
        self.state = CuratorState.PROCESSING

        for idx, path in enumerate(paths):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Run cancelled after %d/%d files", idx, total)
                summary.cancelled = True
                break

            summary.decisions.append(self.process_file(path))
            self._notify_progress(RunProgress(idx + 1, total, path.name))

            if self.pace_seconds > 0 and idx + 1 < total:
                if cancel_event is not None:
                    cancel_event.wait(self.pace_seconds)
                else:
                    time.sleep(self.pace_seconds)

        self.state = CuratorState.CANCELLED if summary.cancelled else CuratorState.COMPLETED
        logger.info(summary.describe())
        if self.observer is not None:
            try:
                self.observer.on_finished(summary)
            except Exception:
                logger.exception("Observer failed to handle the run summary")
        return summary

    def process_file(self, path: Path) -> CurationDecision:
        """Decide on one file. Never raises."""
        if not path.exists():
            logger.debug("Skipping vanished file %s", path)
            return CurationDecision(file_path=path, status=DecisionStatus.SKIPPED)

        try:
            image = decode_image(path)
        except DecodeError as e:
            logger.warning("Failed to process %s: %s", path, e)
            return CurationDecision(file_path=path, status=DecisionStatus.ERROR, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error while decoding %s", path)
            return CurationDecision(file_path=path, status=DecisionStatus.ERROR, error=str(e))

        # person stays set if a later step fails, so error decisions still report it
        person = False
        try:
            person = self._detect_person(image)
            delete = self._should_delete(person, image, path)
        except InferenceError as e:
            logger.warning("Failed to process %s: %s", path, e)
            return CurationDecision(
                file_path=path, status=DecisionStatus.ERROR, has_person=person, error=str(e)
            )
        except Exception as e:
            logger.exception("Unexpected error while processing %s", path)
            return CurationDecision(
                file_path=path, status=DecisionStatus.ERROR, has_person=person, error=str(e)
            )
        finally:
            image.close()

        if not delete:
            logger.debug("%s, has_person=%s, kept", path, person)
            return CurationDecision(file_path=path, status=DecisionStatus.KEPT, has_person=person)

        try:
            delete_file(path)
        except DeletionError as e:
            logger.warning("Failed to delete %s: %s", path, e)
            return CurationDecision(
                file_path=path,
                status=DecisionStatus.DELETE_FAILED,
                has_person=person,
                error=str(e),
            )

        logger.info("Deleted %s (has_person=%s)", path, person)
        return CurationDecision(
            file_path=path, status=DecisionStatus.DELETED, has_person=person, deleted=True
        )

    def _detect_person(self, image: Image.Image) -> bool:
        raw = self.detector.detect(
            image,
            confidence=self.config.confidence_threshold,
            iou=self.config.iou_threshold,
        )
        return has_person(normalize_detections(raw), self.config.confidence_threshold)

    def _should_delete(self, person: bool, image: Image.Image, path: Path) -> bool:
        if not self.config.delete_non_human:
            return False
        if not person:
            return True
        if self.female_policy_active:
            return not self._has_female_face(image, path)
        return False

    def _has_female_face(self, image: Image.Image, path: Path) -> bool:
        """True unless faces were assessed and none of them is female.

        Images without a detectable face, or whose faces cannot be assessed,
        count as passing so they are kept.
        """
        try:
            crops = self.face_locator.locate(image)  # type: ignore[union-attr]
            if not crops:
                logger.debug("%s: no face found, keeping", path)
                return True
            for crop in crops:
                estimate = self.attribute_predictor.predict(crop)  # type: ignore[union-attr]
                logger.debug(
                    "%s: female=%.2f age=%.1f", path, estimate.female_probability, estimate.age
                )
                if estimate.female_probability >= self.config.female_threshold:
                    return True
        except InferenceError as e:
            logger.warning("Face attributes unavailable for %s, keeping: %s", path, e)
            return True
        return False

    def _notify_progress(self, progress: RunProgress) -> None:
        if self.observer is None:
            return
        try:
            self.observer.on_progress(progress)
        except Exception:
            logger.exception("Observer failed on progress for %s", progress.current_file_name)


def decode_image(path: Path) -> Image.Image:
    """Open and fully decode an image as RGB.

    Raises:
        DecodeError: If the bytes are corrupt or the format is unsupported.
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Cannot decode {path.name}: {e}", file_path=path) from e


def delete_file(path: Path) -> None:
    """Delete a file.

    Raises:
        DeletionError: If the filesystem refuses.
    """
    try:
        path.unlink()
    except OSError as e:
        raise DeletionError(f"Cannot delete {path.name}: {e}", file_path=path) from e
