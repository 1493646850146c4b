from __future__ import annotations
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, conint, field_validator

from ..core.build_model import BuildPlan, build_class_map, parse_class_list
from ..core.errors import ConfigError

NonNegInt = conint(ge=0)
PosInt = conint(ge=1)


class BuildConfig(BaseModel):
    sources: List[str] = Field(default_factory=list)
    output_dir: Optional[str] = None
    classes: List[str] = Field(default_factory=list)
    process_images: bool = True
    max_kb: NonNegInt = 500
    train_ratio: float = 0.8
    val_ratio: float = 0.2
    seed: Optional[int] = None
    max_workers: PosInt = 4
    write_report: bool = True

    @field_validator("classes", mode="before")
    @classmethod
    def split_classes(cls, v):
        # accept "hole, nut" as typed into a single text field
        return parse_class_list(v)

    @field_validator("sources", mode="before")
    @classmethod
    def single_source(cls, v):
        if v is None:
            return []
        return [v] if isinstance(v, str) else v

    def to_plan(self) -> BuildPlan:
        if not self.sources:
            raise ConfigError("no source directories given")
        if not self.output_dir:
            raise ConfigError("no output directory given")
        return BuildPlan(
            sources=[Path(s) for s in self.sources],
            output_dir=Path(self.output_dir),
            class_map=build_class_map(self.classes),
            process_images=self.process_images,
            max_kb=self.max_kb,
            train_ratio=self.train_ratio,
            val_ratio=self.val_ratio,
            seed=self.seed,
            max_workers=self.max_workers,
            write_report=self.write_report,
        )
