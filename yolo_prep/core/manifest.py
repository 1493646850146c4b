from __future__ import annotations
from pathlib import Path
from typing import Dict

import yaml

from .build_model import ClassMap, SUBSETS, invert_class_map
from .errors import ManifestError

MANIFEST_NAME = "data.yaml"


def manifest_dict(out_root: Path, class_map: ClassMap) -> Dict:
    id_to_name = invert_class_map(class_map)
    ids = sorted(id_to_name)
    if ids != list(range(len(ids))):
        raise ManifestError(f"class ids are not contiguous from 0: {ids}")

    yaml_obj = {"path": str(out_root)}
    for subset in SUBSETS:
        yaml_obj[subset.value] = f"images/{subset.value}"
    yaml_obj["nc"] = len(ids)
    yaml_obj["names"] = {i: id_to_name[i] for i in ids}
    return yaml_obj


def write_manifest(out_root: Path, class_map: ClassMap) -> Path:
    yaml_obj = manifest_dict(out_root, class_map)
    path = out_root / MANIFEST_NAME
    try:
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(yaml_obj, f, sort_keys=False, allow_unicode=True)
    except OSError as e:
        raise ManifestError(f"cannot write {path}: {e}") from e
    return path
