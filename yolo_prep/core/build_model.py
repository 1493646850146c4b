from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .errors import ConfigError

ClassMap = Dict[str, int]


class Subset(str, Enum):
    TRAIN = "train"
    VAL = "val"
    TEST = "test"


SUBSETS = (Subset.TRAIN, Subset.VAL, Subset.TEST)


@dataclass(frozen=True)
class Task:
    image_path: Path
    annotation_path: Path
    subset: Optional[Subset] = None

    @property
    def stem(self) -> str:
        return self.image_path.stem


def parse_class_list(classes: Union[str, Iterable[str], None]) -> List[str]:
    '''Accept "hole, nut" or ["hole", "nut"]; names are whitespace-trimmed.

    Trailing blanks ("hole, nut,") are dropped; they never shift an id.
    '''
    if classes is None:
        return []
    if isinstance(classes, str):
        classes = classes.split(",")
    names = [str(c).strip() for c in classes]
    while names and not names[-1]:
        names.pop()
    return names


def build_class_map(classes: Union[str, Iterable[str], None]) -> ClassMap:
    """Assign ids 0..N-1 by position in the ordered class list."""
    names = parse_class_list(classes)
    if not names or not any(names):
        raise ConfigError("class list is empty")

    class_map: ClassMap = {}
    for idx, name in enumerate(names):
        if not name:
            raise ConfigError(f"class name at position {idx} is blank")
        if name in class_map:
            raise ConfigError(f"duplicate class name: {name!r}")
        class_map[name] = idx
    return class_map


def invert_class_map(class_map: ClassMap) -> Dict[int, str]:
    return {cid: name for name, cid in class_map.items()}


@dataclass
class BuildPlan:
    sources: List[Path]
    output_dir: Path
    class_map: ClassMap
    process_images: bool = True
    max_kb: int = 500
    train_ratio: float = 0.8
    val_ratio: float = 0.2
    seed: Optional[int] = None
    max_workers: int = 4
    write_report: bool = True

    def images_dir(self, subset: Subset) -> Path:
        return self.output_dir / "images" / subset.value

    def labels_dir(self, subset: Subset) -> Path:
        return self.output_dir / "labels" / subset.value

    def to_json(self) -> dict:
        return {
            "sources": [str(p) for p in self.sources],
            "output_dir": str(self.output_dir),
            "classes": [name for name, _ in sorted(self.class_map.items(), key=lambda kv: kv[1])],
            "process_images": self.process_images,
            "max_kb": self.max_kb,
            "train_ratio": self.train_ratio,
            "val_ratio": self.val_ratio,
            "seed": self.seed,
            "max_workers": self.max_workers,
        }
