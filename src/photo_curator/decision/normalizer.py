"""Normalize detector results of unknown shape into (label, score) pairs.

Detector libraries disagree on how a result record is laid out: the label may
live under ``label``, ``name``, ``class_name`` or ``category``, sometimes as a
nested object with its own ``name``; the score may be ``score``,
``confidence`` or a probability, sometimes as a string or a 0-d tensor. This
module resolves both through ordered preference lists so the rest of the
pipeline only ever sees ``NormalizedDetection``.
"""

from collections.abc import Iterable, Mapping
from numbers import Real
from typing import Any

from photo_curator.models import NormalizedDetection

LABEL_FIELDS: tuple[str, ...] = ("label", "label_name", "name", "class_name", "category")
SCORE_FIELDS: tuple[str, ...] = ("score", "confidence", "conf", "prob", "probability")
NESTED_LABEL_FIELD = "name"
DEFAULT_SCORE = 1.0

_MISSING = object()


def normalize_detections(records: Iterable[Any] | None) -> list[NormalizedDetection]:
    """Normalize every record that carries a usable label.

    Records without a label are skipped silently.
    """
    if records is None:
        return []
    normalized: list[NormalizedDetection] = []
    for record in records:
        detection = normalize_detection(record)
        if detection is not None:
            normalized.append(detection)
    return normalized


def normalize_detection(record: Any) -> NormalizedDetection | None:
    """Normalize a single record, or return None if it has no label."""
    if record is None:
        return None
    label = _resolve_label(record)
    if not label:
        return None
    score = _resolve_score(record)
    return NormalizedDetection(label=label, score=score)


def _resolve_label(record: Any) -> str | None:
    value = _first_present(record, LABEL_FIELDS)
    if value is _MISSING:
        return None
    if not isinstance(value, str):
        # Label objects (e.g. {"id": 0, "name": "person"}) carry the text one level down
        nested = _lookup(value, NESTED_LABEL_FIELD)
        if nested is _MISSING or nested is None:
            return None
        value = str(nested)
    label = value.strip().casefold()
    return label or None


def _resolve_score(record: Any) -> float:
    for name in SCORE_FIELDS:
        value = _lookup(record, name)
        if value is _MISSING:
            continue
        score = _to_float(value)
        if score is not None:
            return min(1.0, max(0.0, score))
    return DEFAULT_SCORE


def _first_present(record: Any, names: Iterable[str]) -> Any:
    """Return the value of the first field in ``names`` that is set on ``record``."""
    for name in names:
        value = _lookup(record, name)
        if value is not _MISSING and value is not None:
            return value
    return _MISSING


def _lookup(record: Any, name: str) -> Any:
    """Find ``name`` on a mapping or object, tolerating case and separator style."""
    if isinstance(record, Mapping):
        wanted = _canonical(name)
        for key, value in record.items():
            if isinstance(key, str) and _canonical(key) == wanted:
                return value
        return _MISSING
    if isinstance(record, (str, bytes, Real)):
        return _MISSING
    for attr in _spellings(name):
        try:
            return getattr(record, attr)
        except AttributeError:
            continue
        except Exception:
            # a property that fails to compute counts as absent
            return _MISSING
    return _MISSING


def _canonical(name: str) -> str:
    return name.replace("_", "").replace("-", "").casefold()


def _spellings(name: str) -> list[str]:
    """snake_case, PascalCase, camelCase and flat spellings of a field name."""
    parts = name.split("_")
    pascal = "".join(p.capitalize() for p in parts)
    camel = parts[0] + "".join(p.capitalize() for p in parts[1:])
    flat = "".join(parts)
    spellings: list[str] = []
    for candidate in (name, pascal, camel, flat, name.upper()):
        if candidate not in spellings:
            spellings.append(candidate)
    return spellings


def _to_float(value: Any) -> float | None:
    """Parse a score value; None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    if isinstance(value, Real):
        return float(value)
    # numpy scalars / one-element arrays / torch tensors
    item = getattr(value, "item", None)
    if callable(item):
        try:
            return float(item())
        except (TypeError, ValueError, RuntimeError):
            # multi-element arrays and tensors
            return None
    return None
