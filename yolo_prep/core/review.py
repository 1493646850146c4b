"""
Helpers behind the dataset review mode.

The editor keeps its own widgets; everything here is plain data in and out:
label files are parsed into pixel rectangles (remembering the raw line so it
can be deleted again), new boxes are appended as YOLO lines, and deletion
removes the first line whose text matches.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .build_model import SUBSETS, Subset
from .yolo_io import Box, is_image, parse_yolo_line, write_label_lines

MIN_DRAG_PIXELS = 5


@dataclass(frozen=True)
class ReviewItem:
    subset: Subset
    image_path: Path
    label_path: Path

    @property
    def title(self) -> str:
        return f"[{self.subset.value}] {self.image_path.name}"


@dataclass(frozen=True)
class PixelBox:
    cls: int
    x: float
    y: float
    w: float
    h: float
    raw: str

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h


def list_review_items(dataset_dir: Path) -> List[ReviewItem]:
    '''Every image under images/{train,val,test}, with the label path it maps to.'''
    items: List[ReviewItem] = []
    for subset in SUBSETS:
        img_dir = dataset_dir / "images" / subset.value
        if not img_dir.is_dir():
            continue
        for p in sorted(img_dir.iterdir()):
            if p.is_file() and is_image(p):
                label = dataset_dir / "labels" / subset.value / f"{p.stem}.txt"
                items.append(ReviewItem(subset, p, label))
    return items


def read_pixel_boxes(label_path: Path, img_w: float, img_h: float) -> List[PixelBox]:
    if not label_path.exists():
        return []
    out: List[PixelBox] = []
    for line in label_path.read_text(encoding="utf-8").split("\n"):
        box = parse_yolo_line(line)
        if box is None:
            continue
        x1, y1, x2, y2 = box.to_xyxy(img_w, img_h)
        out.append(PixelBox(box.cls, x1, y1, x2 - x1, y2 - y1, line))
    return out


def box_at(boxes: Sequence[PixelBox], px: float, py: float) -> Optional[PixelBox]:
    '''Topmost (last drawn) box under the point.'''
    for b in reversed(boxes):
        if b.contains(px, py):
            return b
    return None


def drag_rect(start: Tuple[float, float], end: Tuple[float, float],
              min_size: float = MIN_DRAG_PIXELS) -> Optional[Tuple[float, float, float, float]]:
    '''(x, y, w, h) spanned by a drag in any direction; None for a click-sized drag.'''
    x = min(start[0], end[0])
    y = min(start[1], end[1])
    w = abs(start[0] - end[0])
    h = abs(start[1] - end[1])
    if w < min_size or h < min_size:
        return None
    return (x, y, w, h)


def append_label_line(label_path: Path, line: str) -> None:
    label_path.parent.mkdir(parents=True, exist_ok=True)
    prefix = ""
    if label_path.exists():
        existing = label_path.read_text(encoding="utf-8")
        if existing and not existing.endswith("\n"):
            prefix = "\n"
    with open(label_path, "a", encoding="utf-8") as f:
        f.write(prefix + line)


def append_box(label_path: Path, cls: int, x: float, y: float, w: float, h: float,
               img_w: float, img_h: float) -> str:
    '''Append a pixel-space box as a normalized line; returns the line written.'''
    line = Box.from_xyxy(cls, x, y, x + w, y + h, img_w, img_h).to_line()
    append_label_line(label_path, line)
    return line


def remove_label_line(label_path: Path, raw: str) -> bool:
    """Drop the first line whose trimmed text equals ``raw`` trimmed.

    Blank lines are dropped on rewrite. Returns False when nothing matched.
    """
    if not label_path.exists():
        return False
    target = raw.strip()
    kept: List[str] = []
    deleted = False
    for line in label_path.read_text(encoding="utf-8").split("\n"):
        if not deleted and line.strip() == target:
            deleted = True
            continue
        if line.strip():
            kept.append(line)
    write_label_lines(label_path, kept)
    return deleted
