"""Data models for the curation pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from photo_curator.config import (
    DEFAULT_CONFIDENCE,
    DEFAULT_FEMALE_THRESHOLD,
    DEFAULT_IOU,
)


@dataclass
class ObjectDetection:
    """A single object detected by the YOLO adapter."""

    label: str
    confidence: float
    bbox: tuple[float, float, float, float]  # (x1, y1, x2, y2)


@dataclass(frozen=True)
class NormalizedDetection:
    """A detection reduced to a case-folded label and a score."""

    label: str
    score: float


@dataclass(frozen=True)
class AttributeEstimate:
    """Gender/age estimate for one face crop."""

    female_probability: float
    age: float


class DecisionStatus(str, Enum):
    """Outcome tag for one processed file."""

    KEPT = "kept"
    DELETED = "deleted"
    SKIPPED = "skipped"
    ERROR = "error"
    DELETE_FAILED = "delete_failed"


@dataclass(frozen=True)
class CurationDecision:
    """The recorded outcome for one file."""

    file_path: Path
    status: DecisionStatus
    has_person: bool = False
    deleted: bool = False
    error: str | None = None


@dataclass(frozen=True)
class RunProgress:
    """Progress snapshot emitted after each file."""

    processed_count: int
    total_count: int
    current_file_name: str

    @property
    def fraction(self) -> float:
        if self.total_count <= 0:
            return 0.0
        return min(1.0, self.processed_count / self.total_count)

    @property
    def status(self) -> str:
        return f"Processing {self.processed_count}/{self.total_count}: {self.current_file_name}"


@dataclass
class RunSummary:
    """Aggregate result of one curation run."""

    total_files: int
    decisions: list[CurationDecision] = field(default_factory=list)
    cancelled: bool = False

    @property
    def deleted_count(self) -> int:
        return sum(1 for d in self.decisions if d.deleted)

    @property
    def processed_count(self) -> int:
        return len(self.decisions)

    def count(self, status: DecisionStatus) -> int:
        """Number of decisions carrying the given status."""
        return sum(1 for d in self.decisions if d.status == status)

    def describe(self) -> str:
        """Human-readable one-line summary."""
        text = f"Total files: {self.total_files}, deleted: {self.deleted_count}"
        if self.cancelled:
            text += f" (cancelled after {self.processed_count})"
        return text


@dataclass
class RunRecord:
    """A stored curation run."""

    run_id: str
    root: str
    started_at: datetime
    finished_at: datetime | None
    total_files: int
    deleted_count: int
    cancelled: bool


@dataclass(frozen=True)
class RunConfig:
    """Options recognised by a curation run."""

    use_accelerator: bool = False
    include_subfolders: bool = True
    delete_non_human: bool = True
    only_keep_female: bool = False
    confidence_threshold: float = DEFAULT_CONFIDENCE
    iou_threshold: float = DEFAULT_IOU
    female_threshold: float = DEFAULT_FEMALE_THRESHOLD


class CuratorState(str, Enum):
    """Lifecycle of a BatchCurator run."""

    IDLE = "idle"
    ENUMERATING = "enumerating"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
