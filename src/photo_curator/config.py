"""Project-wide configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(os.environ.get("PHOTO_CURATOR_PROJECT_ROOT", Path.cwd()))

load_dotenv(PROJECT_ROOT / ".env")


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment ("1", "true", "yes", "on")."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


MODEL_DIR = Path(os.environ.get("PHOTO_CURATOR_MODEL_DIR", PROJECT_ROOT / "models"))
REPORT_DB_PATH = PROJECT_ROOT / "photo_curator.duckdb"

# Object detection – YOLO11
YOLO_MODEL_NAME = "yolo11m"
YOLO_MODEL_PATH = Path(
    os.environ.get("PHOTO_CURATOR_YOLO_MODEL", MODEL_DIR / f"{YOLO_MODEL_NAME}.pt")
)

# Face attributes – InsightFace genderage
GENDERAGE_MODEL_PATH = Path(
    os.environ.get("PHOTO_CURATOR_GENDERAGE_MODEL", MODEL_DIR / "genderage.onnx")
)
GENDERAGE_INPUT_SIZE = (112, 112)  # (width, height)

# Face localisation – InsightFace
INSIGHTFACE_MODEL_NAME = "buffalo_l"
FACE_DET_SIZE = (640, 640)

# Decision thresholds
DEFAULT_CONFIDENCE = 0.50
DEFAULT_IOU = 0.70
DEFAULT_FEMALE_THRESHOLD = 0.50

# Delay between files so progress observers are not flooded
PACE_SECONDS = 0.1

IMAGE_PATTERNS: tuple[str, ...] = (
    "*.jpg",
    "*.jpeg",
    "*.png",
    "*.bmp",
    "*.gif",
    "*.webp",
    "*.wbmp",
    "*.heif",
    "*.dng",
    "*.ktx",
    "*.pkm",
)

USE_ACCELERATOR = _env_flag("PHOTO_CURATOR_USE_ACCELERATOR")
LOG_LEVEL = os.environ.get("PHOTO_CURATOR_LOG_LEVEL", "INFO").upper()
