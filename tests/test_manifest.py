import pytest
import yaml

from yolo_prep.core.build_model import build_class_map
from yolo_prep.core.errors import ManifestError
from yolo_prep.core.manifest import MANIFEST_NAME, manifest_dict, write_manifest


def test_manifest_layout(tmp_path):
    path = write_manifest(tmp_path, build_class_map("hole, nut ,bolt"))

    assert path == tmp_path / MANIFEST_NAME
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["path"] == str(tmp_path)
    assert data["train"] == "images/train"
    assert data["val"] == "images/val"
    assert data["test"] == "images/test"
    assert data["nc"] == 3
    assert data["names"] == {0: "hole", 1: "nut", 2: "bolt"}


def test_manifest_key_order(tmp_path):
    text = write_manifest(tmp_path, {"x": 0}).read_text(encoding="utf-8")
    keys = [ln.split(":")[0] for ln in text.splitlines() if not ln.startswith(" ")]
    assert keys == ["path", "train", "val", "test", "nc", "names"]


def test_names_are_ascending_by_id(tmp_path):
    data = manifest_dict(tmp_path, {"c": 2, "a": 0, "b": 1})
    assert list(data["names"].items()) == [(0, "a"), (1, "b"), (2, "c")]


def test_non_contiguous_ids_are_rejected(tmp_path):
    with pytest.raises(ManifestError):
        manifest_dict(tmp_path, {"a": 0, "b": 2})


def test_unwritable_manifest_raises(tmp_path):
    with pytest.raises(ManifestError):
        write_manifest(tmp_path / "missing" / "dir", {"x": 0})
