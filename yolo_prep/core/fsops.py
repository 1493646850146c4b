from __future__ import annotations
import shutil
from pathlib import Path

from .build_model import SUBSETS
from .errors import DirectoryCreationError


def safe_mkdirs(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def scaffold_output(out_root: Path) -> None:
    '''images/{train,val,test} and labels/{train,val,test}; any failure is fatal.'''
    try:
        for subset in SUBSETS:
            safe_mkdirs(out_root / "images" / subset.value)
            safe_mkdirs(out_root / "labels" / subset.value)
    except OSError as e:
        raise DirectoryCreationError(f"cannot create output layout under {out_root}: {e}") from e


def copy_file(src: Path, dst: Path) -> None:
    if not src.is_file():
        raise OSError(f"{src} is not a regular file")
    safe_mkdirs(dst.parent)
    shutil.copyfile(src, dst)


def atomic_write_bytes(dst: Path, data: bytes) -> None:
    safe_mkdirs(dst.parent)
    tmp = dst.with_name(dst.name + ".tmp")
    tmp.write_bytes(data)
    tmp.replace(dst)
