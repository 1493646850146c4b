from __future__ import annotations
import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List

from .build_model import Task
from .yolo_io import annotation_for_image, list_images

logger = logging.getLogger(__name__)


class SourceRepository:
    """
    One raw source folder:
    - <dir>/<name>.jpg|.jpeg|.png|.bmp   (any case, not recursive)
    - <dir>/<name>.json                  optional annotation next to it
    """
    def __init__(self, root: Path):
        self.root = Path(root)

    def list_images(self) -> List[Path]:
        return list_images(self.root)

    def annotation_path_for(self, image_path: Path) -> Path:
        return annotation_for_image(image_path)

    def tasks(self) -> List[Task]:
        return [Task(img, self.annotation_path_for(img)) for img in self.list_images()]


def discover_tasks(sources: Iterable[Path]) -> List[Task]:
    """Collect (image, annotation) pairs from every source directory.

    Unreadable directories are logged and skipped.
    """
    tasks: List[Task] = []
    for src in sources:
        repo = SourceRepository(Path(src))
        try:
            found = repo.tasks()
        except OSError as e:
            logger.warning(f"Skipping unreadable source directory {src}: {e}")
            continue
        logger.info(f"Found {len(found)} images in {src}")
        tasks.extend(found)

    by_stem: Dict[str, List[Path]] = defaultdict(list)
    for t in tasks:
        by_stem[t.stem].append(t.image_path)
    for stem, paths in by_stem.items():
        if len(paths) > 1:
            logger.warning(f"Duplicate image basename '{stem}' in {len(paths)} sources; outputs will collide")
    return tasks
