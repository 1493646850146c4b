import random
from pathlib import Path

import pytest

from yolo_prep.core.build_model import Subset, Task
from yolo_prep.core.splitting import assign_subset, partition_tasks, subset_sizes


def _tasks(n):
    return [Task(Path(f"/src/img_{i:03d}.jpg"), Path(f"/src/img_{i:03d}.json")) for i in range(n)]


@pytest.mark.parametrize("n,train,val,expected", [
    (20, 0.6, 0.2, (12, 4, 4)),
    (10, 0.8, 0.2, (8, 2, 0)),
    (7, 0.5, 0.25, (3, 1, 3)),
    (5, 1.0, 0.0, (5, 0, 0)),
    (3, 0.0, 0.0, (0, 0, 3)),
    (1, 0.8, 0.1, (0, 0, 1)),
])
def test_partition_counts(n, train, val, expected):
    result = partition_tasks(_tasks(n), train, val, seed=42)
    sizes = subset_sizes(result)
    assert (sizes[Subset.TRAIN], sizes[Subset.VAL], sizes[Subset.TEST]) == expected


def test_partition_conserves_tasks():
    tasks = _tasks(53)
    result = partition_tasks(tasks, 0.7, 0.2, seed=3)
    assert len(result) == len(tasks)
    assert sorted(t.image_path for t in result) == sorted(t.image_path for t in tasks)
    assert all(t.subset is not None for t in result)


def test_partition_is_repeatable_with_seed():
    a = partition_tasks(_tasks(30), 0.7, 0.2, seed=1234)
    b = partition_tasks(_tasks(30), 0.7, 0.2, seed=1234)
    assert [(t.image_path, t.subset) for t in a] == [(t.image_path, t.subset) for t in b]


def test_partition_accepts_injected_rng():
    a = partition_tasks(_tasks(30), 0.5, 0.5, rng=random.Random(9))
    b = partition_tasks(_tasks(30), 0.5, 0.5, rng=random.Random(9))
    assert [t.image_path for t in a] == [t.image_path for t in b]


def test_partition_shuffles():
    tasks = _tasks(40)
    result = partition_tasks(tasks, 1.0, 0.0, seed=5)
    assert [t.image_path for t in result] != [t.image_path for t in tasks]


def test_partition_does_not_mutate_input():
    tasks = _tasks(10)
    partition_tasks(tasks, 0.5, 0.5, seed=1)
    assert [t.subset for t in tasks] == [None] * 10
    assert [t.image_path.name for t in tasks] == sorted(t.image_path.name for t in tasks)


def test_empty_task_list():
    assert partition_tasks([], 0.8, 0.2) == []


def test_ratios_over_one_leave_test_empty():
    sizes = subset_sizes(partition_tasks(_tasks(10), 0.8, 0.5, seed=0))
    assert (sizes[Subset.TRAIN], sizes[Subset.VAL], sizes[Subset.TEST]) == (8, 2, 0)


def test_assign_subset_boundaries():
    assert [assign_subset(i, 2, 1) for i in range(4)] == [
        Subset.TRAIN, Subset.TRAIN, Subset.VAL, Subset.TEST,
    ]
