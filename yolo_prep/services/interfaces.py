"""
Abstract interfaces for yolo-prep services.
These interfaces define contracts for the service components,
so a front end (CLI, review window) only depends on the abstractions.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple, Any
from pathlib import Path
from dataclasses import dataclass, field

from ..config.schema import BuildConfig
from ..core.pipeline import TaskResult, summarize
from ..core.progress import CancelToken, ProgressCallback
from ..core.review import PixelBox, ReviewItem


@dataclass
class BuildSummary:
    """Outcome of one dataset build run."""
    output_dir: Path
    results: List[TaskResult] = field(default_factory=list)
    manifest_path: Optional[Path] = None
    report_path: Optional[Path] = None

    @property
    def counts(self) -> dict:
        return summarize(self.results)


class ILogger(ABC):
    """Interface for logging operations."""

    @abstractmethod
    def debug(self, message: str, **kwargs) -> None:
        """Log a debug message."""
        pass

    @abstractmethod
    def info(self, message: str, **kwargs) -> None:
        """Log an info message."""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs) -> None:
        """Log a warning message."""
        pass

    @abstractmethod
    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        """Log an error message."""
        pass


class IConfigService(ABC):
    """Interface for build configuration management."""

    @abstractmethod
    def load_build_config(self, path: Path) -> BuildConfig:
        """Load a build job from a YAML or JSON file."""
        pass

    @abstractmethod
    def build_config_from_dict(self, data: dict) -> BuildConfig:
        """Validate a build job given as a dictionary."""
        pass

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a persisted default."""
        pass

    @abstractmethod
    def set_setting(self, key: str, value: Any) -> None:
        """Set a persisted default."""
        pass


class IImageService(ABC):
    """Interface for image decode, probe and encode operations."""

    @abstractmethod
    def load_image(self, path: Path) -> Optional[Any]:
        """Decode an image; None if it cannot be decoded."""
        pass

    @abstractmethod
    def get_image_size(self, path: Path) -> Optional[Tuple[int, int]]:
        """(width, height) from the header, without a full decode."""
        pass

    @abstractmethod
    def encode_within_budget(self, image: Any, max_kb: int) -> bytes:
        """JPEG bytes under max_kb where reachable."""
        pass


class IDatasetService(ABC):
    """Interface for building a dataset from raw sources."""

    @abstractmethod
    def build(self, config: BuildConfig, progress_cb: Optional[ProgressCallback] = None,
              cancel: Optional[CancelToken] = None) -> BuildSummary:
        """Run discovery, split, conversion and manifest writing."""
        pass


class IReviewService(ABC):
    """Interface used by the review/editing front end."""

    @abstractmethod
    def list_items(self, dataset_dir: Path) -> List[ReviewItem]:
        """List reviewable images of a built dataset."""
        pass

    @abstractmethod
    def load_boxes(self, item: ReviewItem) -> List[PixelBox]:
        """Label boxes of an item in pixel space."""
        pass

    @abstractmethod
    def add_box(self, item: ReviewItem, cls: int, rect: Tuple[float, float, float, float]) -> Optional[str]:
        """Append a pixel rectangle to the item's label file."""
        pass

    @abstractmethod
    def delete_box(self, item: ReviewItem, box: PixelBox) -> bool:
        """Remove a box's line from the item's label file."""
        pass
