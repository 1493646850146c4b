"""
Batch conversion of discovered tasks into a YOLO dataset tree.

Each task runs decode -> encode/copy -> annotation convert -> label write on
one worker thread while holding a slot of a fixed-size admission gate. Any
error inside a task becomes a ``TaskResult``; nothing a single task does can
stop its siblings.
"""

from __future__ import annotations
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .annotations import convert_annotation_file
from .build_model import BuildPlan, Task
from .encoding import encode_within_budget
from .errors import ImageDecodeError, LabelWriteError, TaskCancelled
from .fsops import atomic_write_bytes, copy_file
from .progress import CancelToken, Progress, ProgressCallback
from .yolo_io import imread_unicode, probe_image_size, write_label_lines

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class TaskOutcome(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class TaskResult:
    task: Task
    outcome: TaskOutcome = TaskOutcome.SUCCESS
    stage: str = "pending"
    error: Optional[str] = None
    image_out: Optional[Path] = None
    label_out: Optional[Path] = None
    boxes: int = 0

    def to_json(self) -> dict:
        return {
            "image": str(self.task.image_path),
            "subset": self.task.subset.value if self.task.subset else None,
            "outcome": self.outcome.value,
            "stage": self.stage,
            "error": self.error,
        }


Decoder = Callable[[Path], object]
SizeProbe = Callable[[Path], Optional[Tuple[int, int]]]
Encoder = Callable[[object, int], bytes]


class BatchPipeline:
    def __init__(
        self,
        decode: Decoder = imread_unicode,
        probe: SizeProbe = probe_image_size,
        encode: Encoder = encode_within_budget,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._decode = decode
        self._probe = probe
        self._encode = encode
        self.max_workers = max(1, int(max_workers))

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------
    def run(
        self,
        tasks: Sequence[Task],
        plan: BuildPlan,
        progress_cb: ProgressCallback | None = None,
        cancel: CancelToken | None = None,
    ) -> List[TaskResult]:
        """Process every task and block until all workers are done.

        Results come back in input order; completion order is arbitrary.
        """
        tasks = list(tasks)
        progress = Progress(total=len(tasks))
        gate = threading.BoundedSemaphore(self.max_workers)
        results: Dict[int, TaskResult] = {}

        def report(p: Progress) -> None:
            if progress_cb is None:
                return
            try:
                progress_cb(p)
            except Exception as e:
                logger.warning(f"Progress callback raised: {e}")

        def worker(index: int, task: Task) -> Tuple[int, TaskResult]:
            try:
                return index, self._run_guarded(task, plan, cancel)
            finally:
                gate.release()
                progress.step(callback=report)

        logger.info(f"Processing {len(tasks)} tasks with {self.max_workers} workers")
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="yolo-prep") as executor:
            futures = []
            for index, task in enumerate(tasks):
                if cancel and cancel.is_cancelled():
                    results[index] = TaskResult(task, TaskOutcome.SKIPPED, "cancelled", "cancelled before start")
                    progress.step(callback=report)
                    continue
                gate.acquire()
                try:
                    futures.append(executor.submit(worker, index, task))
                except BaseException:
                    gate.release()
                    raise

            for fut in as_completed(futures):
                index, result = fut.result()
                results[index] = result

        return [results[i] for i in range(len(tasks))]

    # ------------------------------------------------------------------
    # Per-task error boundary
    # ------------------------------------------------------------------
    def _run_guarded(self, task: Task, plan: BuildPlan, cancel: CancelToken | None) -> TaskResult:
        result = TaskResult(task)
        try:
            self._process(task, plan, cancel, result)
            result.stage = "done"
            logger.debug(f"Processed {task.image_path.name} -> {task.subset.value} ({result.boxes} boxes)")
        except (ImageDecodeError, TaskCancelled) as e:
            result.outcome = TaskOutcome.SKIPPED
            result.error = str(e)
            if result.stage != "cancelled":
                logger.warning(f"Skipped {task.image_path}: {e}")
        except Exception as e:
            result.outcome = TaskOutcome.FAILED
            result.error = f"{type(e).__name__}: {e}"
            logger.warning(f"Task failed at stage '{result.stage}' for {task.image_path}: {result.error}")
        return result

    @staticmethod
    def _check_cancel(cancel: CancelToken | None, result: TaskResult) -> None:
        if cancel and cancel.is_cancelled():
            result.stage = "cancelled"
            raise TaskCancelled("cancelled")

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    def _process(self, task: Task, plan: BuildPlan, cancel: CancelToken | None, result: TaskResult) -> None:
        if task.subset is None:
            result.stage = "internal"
            raise ValueError("task has no subset assigned")

        self._check_cancel(cancel, result)
        img_w, img_h = self._write_image(task, plan, result)

        self._check_cancel(cancel, result)
        if img_w > 0 and img_h > 0 and task.annotation_path.is_file():
            result.stage = "annotation"
            lines = convert_annotation_file(task.annotation_path, img_w, img_h, plan.class_map)

            result.stage = "label"
            label_out = plan.labels_dir(task.subset) / f"{task.stem}.txt"
            try:
                write_label_lines(label_out, lines)
            except OSError as e:
                raise LabelWriteError(f"cannot write {label_out}: {e}") from e
            result.label_out = label_out
            result.boxes = len(lines)

    def _write_image(self, task: Task, plan: BuildPlan, result: TaskResult) -> Tuple[int, int]:
        images_dir = plan.images_dir(task.subset)

        if plan.process_images:
            result.stage = "decode"
            try:
                img = self._decode(task.image_path)
            except Exception as e:
                raise ImageDecodeError(f"cannot decode {task.image_path}: {e}") from e
            if img is None:
                raise ImageDecodeError(f"cannot decode {task.image_path}")
            img_h, img_w = img.shape[:2]

            result.stage = "image"
            data = self._encode(img, plan.max_kb)
            image_out = images_dir / f"{task.stem}.jpg"
            try:
                atomic_write_bytes(image_out, data)
            except OSError as e:
                raise LabelWriteError(f"cannot write {image_out}: {e}") from e
        else:
            result.stage = "decode"
            size = self._probe(task.image_path)
            if size is None:
                raise ImageDecodeError(f"cannot read image header of {task.image_path}")
            img_w, img_h = size

            result.stage = "image"
            image_out = images_dir / task.image_path.name
            try:
                copy_file(task.image_path, image_out)
            except OSError as e:
                raise LabelWriteError(f"cannot copy to {image_out}: {e}") from e

        result.image_out = image_out
        return img_w, img_h


def summarize(results: Sequence[TaskResult]) -> Dict[str, int]:
    counts = {o.value: 0 for o in TaskOutcome}
    for r in results:
        counts[r.outcome.value] += 1
    return counts
