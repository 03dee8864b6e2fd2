"""Human-presence signal derived from normalized detections."""

from collections.abc import Iterable

from photo_curator.models import NormalizedDetection

PERSON_LABEL = "person"


def has_person(detections: Iterable[NormalizedDetection], min_score: float) -> bool:
    """True if any detection is a person scoring at least ``min_score``."""
    for det in detections:
        if det.label.casefold() == PERSON_LABEL and det.score >= min_score:
            return True
    return False
