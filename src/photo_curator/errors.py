"""Exceptions raised by the curation pipeline."""

from pathlib import Path


class CuratorError(Exception):
    """Base class for all photo-curator errors."""


class ConfigurationError(CuratorError):
    """A model file is missing or could not be loaded."""

    def __init__(self, message: str, model_path: str | Path | None = None) -> None:
        super().__init__(message)
        self.model_path = model_path


class FileProcessingError(CuratorError):
    """Base class for failures scoped to a single image file."""

    def __init__(self, message: str, file_path: str | Path | None = None) -> None:
        super().__init__(message)
        self.file_path = file_path


class DecodeError(FileProcessingError):
    """The image bytes are corrupt or in an unsupported format."""


class InferenceError(FileProcessingError):
    """The inference engine raised during detection or attribute prediction."""


class DeletionError(FileProcessingError):
    """The filesystem refused to delete a file."""
