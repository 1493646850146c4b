import json
from pathlib import Path

import cv2
import numpy as np
import pytest

from yolo_prep.core.build_model import BuildPlan, Subset, Task, build_class_map


def write_image(path: Path, width: int, height: int, noise: bool = False, seed: int = 0) -> Path:
    if noise:
        img = np.random.default_rng(seed).integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    else:
        img = np.full((height, width, 3), (40, 120, 200), dtype=np.uint8)
        cv2.rectangle(img, (width // 4, height // 4), (width // 2, height // 2), (255, 255, 255), -1)
    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), img)
    return path


def write_annotation(path: Path, shapes=None, labels=None) -> Path:
    doc = {}
    if shapes is not None:
        doc["shapes"] = shapes
    if labels is not None:
        doc["labels"] = labels
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


@pytest.fixture
def noisy_image():
    return np.random.default_rng(7).integers(0, 256, size=(256, 256, 3), dtype=np.uint8)


@pytest.fixture
def source_dir(tmp_path):
    d = tmp_path / "src"
    d.mkdir()
    return d


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "out"


@pytest.fixture
def make_plan(source_dir, out_dir):
    def _make(**kwargs):
        params = dict(
            sources=[source_dir],
            output_dir=out_dir,
            class_map=build_class_map(["x", "y"]),
            process_images=False,
            max_kb=500,
            train_ratio=1.0,
            val_ratio=0.0,
            seed=1,
        )
        params.update(kwargs)
        return BuildPlan(**params)
    return _make


def train_task(image_path: Path) -> Task:
    return Task(image_path, image_path.with_suffix(".json"), Subset.TRAIN)
