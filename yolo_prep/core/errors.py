from __future__ import annotations


class DatasetPrepError(Exception):
    """Base class for all dataset preparation errors."""


class ConfigError(DatasetPrepError):
    """Build configuration is missing or invalid; raised before any work starts."""


class AnnotationParseError(DatasetPrepError):
    """Annotation document is not valid JSON in the expected schema."""


class ImageDecodeError(DatasetPrepError):
    """Source image could not be decoded (or its header probed)."""


class ImageEncodeError(DatasetPrepError):
    """Image could not be encoded to JPEG."""


class LabelWriteError(DatasetPrepError):
    """An image or label file could not be written."""


class DirectoryCreationError(DatasetPrepError):
    """Output scaffolding could not be created. Fatal to the run."""


class ManifestError(DatasetPrepError):
    """Dataset descriptor could not be built or written."""


class TaskCancelled(DatasetPrepError):
    """Raised inside a worker when the shared cancel token fires."""
