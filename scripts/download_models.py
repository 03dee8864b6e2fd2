"""Download the model files used by photo-curator into MODEL_DIR.

1. YOLO11m weights from the ultralytics release assets
2. genderage.onnx from the InsightFace buffalo_l pack
"""

import shutil
from pathlib import Path

from insightface.utils.storage import ensure_available
from ultralytics.utils.downloads import attempt_download_asset

from photo_curator.config import (
    GENDERAGE_MODEL_PATH,
    INSIGHTFACE_MODEL_NAME,
    MODEL_DIR,
    YOLO_MODEL_PATH,
)


def download_yolo() -> None:
    """Fetch the YOLO weights unless already present."""
    print(f"\n=== YOLO: {YOLO_MODEL_PATH} ===")
    if YOLO_MODEL_PATH.exists():
        print("Already present. Skipping.")
        return
    path = attempt_download_asset(str(YOLO_MODEL_PATH))
    print(f"Downloaded: {path}")


def download_genderage() -> None:
    """Copy genderage.onnx out of the InsightFace model pack."""
    print(f"\n=== genderage: {GENDERAGE_MODEL_PATH} ===")
    if GENDERAGE_MODEL_PATH.exists():
        print("Already present. Skipping.")
        return
    pack_dir = Path(ensure_available("models", INSIGHTFACE_MODEL_NAME, root="~/.insightface"))
    source = pack_dir / "genderage.onnx"
    if not source.exists():
        print(f"genderage.onnx not found in {pack_dir}.")
        return
    shutil.copy2(source, GENDERAGE_MODEL_PATH)
    print(f"Copied from {source}")


def main() -> None:
    """Download all models."""
    print("photo-curator - model download")
    print("=" * 50)

    MODEL_DIR.mkdir(parents=True, exist_ok=True)
    download_yolo()
    download_genderage()

    print("\n" + "=" * 50)
    print("Models ready.")
    print("\nNext steps:")
    print("  1. uv run photo-curator scan /path/to/photos")
    print("  2. uv run photo-curator run /path/to/photos --keep-non-human --report")


if __name__ == "__main__":
    main()
