"""
Review service implementation for yolo-prep.
Backs the dataset review window: listing, box loading and label edits.
"""

from __future__ import annotations
from typing import List, Optional, Tuple
from pathlib import Path

from .interfaces import IImageService, ILogger, IReviewService
from ..core.review import (
    PixelBox, ReviewItem, append_box, list_review_items, read_pixel_boxes, remove_label_line,
)


class ReviewService(IReviewService):
    """Concrete implementation of review service."""

    def __init__(self, image_service: IImageService, logger: ILogger):
        self._image_service = image_service
        self._logger = logger

    def list_items(self, dataset_dir: Path) -> List[ReviewItem]:
        items = list_review_items(dataset_dir)
        self._logger.info(f"Found {len(items)} images to review in {dataset_dir}")
        return items

    def load_boxes(self, item: ReviewItem) -> List[PixelBox]:
        size = self._image_service.get_image_size(item.image_path)
        if size is None:
            self._logger.warning(f"Cannot read image size for review: {item.image_path}")
            return []
        return read_pixel_boxes(item.label_path, *size)

    def add_box(self, item: ReviewItem, cls: int, rect: Tuple[float, float, float, float]) -> Optional[str]:
        size = self._image_service.get_image_size(item.image_path)
        if size is None:
            self._logger.warning(f"Cannot add box, image size unknown: {item.image_path}")
            return None
        try:
            line = append_box(item.label_path, cls, *rect, *size)
        except OSError as e:
            self._logger.error(f"Failed to append box to {item.label_path}", exception=e)
            return None
        self._logger.debug(f"Added box to {item.label_path.name}", line=line)
        return line

    def delete_box(self, item: ReviewItem, box: PixelBox) -> bool:
        try:
            removed = remove_label_line(item.label_path, box.raw)
        except OSError as e:
            self._logger.error(f"Failed to remove box from {item.label_path}", exception=e)
            return False
        if not removed:
            self._logger.warning(f"Box line not found in {item.label_path.name}", line=box.raw.strip())
        return removed
