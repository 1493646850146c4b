from __future__ import annotations
import random
import time
from collections import Counter
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from .build_model import Subset, Task


def assign_subset(index: int, train_c: int, val_c: int) -> Subset:
    if index < train_c:
        return Subset.TRAIN
    if index < train_c + val_c:
        return Subset.VAL
    return Subset.TEST


def partition_tasks(
    tasks: Sequence[Task],
    train_ratio: float,
    val_ratio: float,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[Task]:
    """Shuffle then label tasks train/val/test by position.

    seed=None seeds from the clock; pass seed (or an rng) for repeatable splits.
    """
    if rng is None:
        rng = random.Random(time.time_ns() if seed is None else seed)

    shuffled = list(tasks)
    rng.shuffle(shuffled)

    total = len(shuffled)
    train_c = int(total * train_ratio)
    val_c = int(total * val_ratio)
    return [replace(t, subset=assign_subset(i, train_c, val_c)) for i, t in enumerate(shuffled)]


def subset_sizes(tasks: Sequence[Task]) -> Dict[Subset, int]:
    counts = Counter(t.subset for t in tasks)
    return {s: counts.get(s, 0) for s in Subset}
