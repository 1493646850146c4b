from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import numpy as np

# Source image extensions picked up by discovery
IMG_EXTS = {".jpg", ".jpeg", ".png", ".bmp"}


# ---------------- Basic helpers ----------------

def is_image(path: Path) -> bool:
    '''Return True if path has a supported image extension.'''
    return path.suffix.lower() in IMG_EXTS


def annotation_for_image(img_path: Path) -> Path:
    return img_path.with_suffix(".json")


# ---------------- YOLO box ----------------


class Box:
    __slots__ = ("cls", "cx", "cy", "w", "h")

    def __init__(self, cls: int, cx: float, cy: float, w: float, h: float):
        self.cls = int(cls)
        self.cx = float(cx)
        self.cy = float(cy)
        self.w = float(w)
        self.h = float(h)

    @classmethod
    def from_xyxy(cls, class_id: int, x1: float, y1: float, x2: float, y2: float,
                  img_w: float, img_h: float) -> "Box":
        # no clamping and no ordering check: inverted rects give negative w/h
        w = x2 - x1
        h = y2 - y1
        return cls(class_id, (x1 + w / 2.0) / img_w, (y1 + h / 2.0) / img_h, w / img_w, h / img_h)

    def to_xyxy(self, img_w: float, img_h: float) -> Tuple[float, float, float, float]:
        half_w = self.w * img_w / 2.0
        half_h = self.h * img_h / 2.0
        cx = self.cx * img_w
        cy = self.cy * img_h
        return (cx - half_w, cy - half_h, cx + half_w, cy + half_h)

    def to_line(self) -> str:
        return f"{self.cls} {self.cx:.6f} {self.cy:.6f} {self.w:.6f} {self.h:.6f}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Box):
            return NotImplemented
        return (self.cls, self.cx, self.cy, self.w, self.h) == (other.cls, other.cx, other.cy, other.w, other.h)

    def __repr__(self) -> str:
        return f"Box({self.to_line()})"


def parse_yolo_line(line: str) -> Optional[Box]:
    '''Parse one "cls cx cy w h" row; None for blank or malformed rows.'''
    parts = line.split()
    if len(parts) < 5:
        return None
    try:
        c = int(float(parts[0]))
        cx, cy, w, h = map(float, parts[1:5])
    except ValueError:
        return None
    return Box(c, cx, cy, w, h)


def write_label_lines(txt_path: Path, lines: Iterable[str]) -> None:
    '''Newline-joined, no trailing newline; an empty list still writes an empty file.'''
    txt_path.parent.mkdir(parents=True, exist_ok=True)
    tmp = txt_path.with_suffix(txt_path.suffix + ".tmp")
    tmp.write_text("\n".join(lines), encoding="utf-8")
    tmp.replace(txt_path)


# ---------------- Images & helpers ----------------


def imread_unicode(path: Path):
    '''cv2.imdecode + np.fromfile (Windows-unicode safe). None if undecodable.'''
    import cv2

    data = np.fromfile(str(path), dtype=np.uint8)
    if data.size == 0:
        return None
    try:
        return cv2.imdecode(data, cv2.IMREAD_COLOR)
    except cv2.error:
        return None


def probe_image_size(path: Path) -> Optional[Tuple[int, int]]:
    '''(width, height) read from the file header only; None if unrecognised.'''
    from PIL import Image, UnidentifiedImageError

    try:
        with Image.open(path) as im:
            w, h = im.size
    except (UnidentifiedImageError, OSError, ValueError):
        return None
    if w <= 0 or h <= 0:
        return None
    return (w, h)


def list_images(root: Path) -> List[Path]:
    '''Images directly under root (non-recursive), sorted.'''
    out = [p for p in root.iterdir() if p.is_file() and is_image(p)]
    out.sort()
    return out

