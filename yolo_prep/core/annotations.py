"""
Annotation JSON -> normalized YOLO boxes.

Two shape kinds are understood:
  - ``shapes``: polygons (labelme style) given as ``label`` + ``points``
  - ``labels``: explicit rectangles given as ``name`` + ``x1,y1,x2,y2``
Both reduce to an axis-aligned pixel rectangle which is normalized against
the decoded image size. Shapes whose label is not in the class map are dropped.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from .build_model import ClassMap
from .errors import AnnotationParseError
from .yolo_io import Box


class PolygonShape(BaseModel):
    label: Optional[str] = None
    points: List[List[float]] = Field(default_factory=list)

    @field_validator("points", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        # null points are empty (and skipped), null coordinates read as 0
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        out = []
        for p in v:
            if p is None:
                p = []
            elif isinstance(p, list):
                p = [0.0 if c is None else c for c in p]
            out.append(p)
        return out

    def bounds(self) -> Optional[tuple]:
        '''(x1, y1, x2, y2) over all points with at least two coordinates.'''
        pts = [p for p in self.points if len(p) >= 2]
        if not pts:
            return None
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return (min(xs), min(ys), max(xs), max(ys))


class RectLabel(BaseModel):
    name: Optional[str] = None
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    @field_validator("x1", "y1", "x2", "y2", mode="before")
    @classmethod
    def none_as_zero(cls, v):
        return 0.0 if v is None else v


class AnnotationDocument(BaseModel):
    shapes: List[PolygonShape] = Field(default_factory=list)
    labels: List[RectLabel] = Field(default_factory=list)

    @field_validator("shapes", "labels", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v


def parse_annotation_document(data: Union[bytes, str]) -> AnnotationDocument:
    try:
        return AnnotationDocument.model_validate_json(data)
    except (ValidationError, ValueError) as e:
        raise AnnotationParseError(str(e)) from e


def load_annotation(path: Path) -> AnnotationDocument:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise AnnotationParseError(f"cannot read {path}: {e}") from e
    return parse_annotation_document(data)


def convert_annotation(document: AnnotationDocument, img_w: int, img_h: int,
                       class_map: ClassMap) -> List[Box]:
    """Project every recognised shape to a normalized box.

    Polygons come first, then rectangles, each in document order.
    img_w/img_h must be the true decoded dimensions; nothing cross-checks them.
    """
    out: List[Box] = []

    for shape in document.shapes:
        cls_id = class_map.get(shape.label)
        if cls_id is None:
            continue
        bounds = shape.bounds()
        if bounds is None:
            continue
        out.append(Box.from_xyxy(cls_id, *bounds, img_w, img_h))

    for rect in document.labels:
        cls_id = class_map.get(rect.name)
        if cls_id is None:
            continue
        out.append(Box.from_xyxy(cls_id, rect.x1, rect.y1, rect.x2, rect.y2, img_w, img_h))

    return out


def convert_annotation_file(path: Path, img_w: int, img_h: int, class_map: ClassMap) -> List[str]:
    '''Read, parse and convert one annotation file into label lines.'''
    boxes = convert_annotation(load_annotation(path), img_w, img_h, class_map)
    return [b.to_line() for b in boxes]
