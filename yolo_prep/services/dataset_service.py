"""
Dataset service implementation for yolo-prep.
Runs one build end to end: discovery, split, conversion, manifest, report.
"""

from __future__ import annotations
from typing import Optional

from .interfaces import BuildSummary, IDatasetService, IImageService, ILogger
from ..config.schema import BuildConfig
from ..core.fsops import scaffold_output
from ..core.manifest import write_manifest
from ..core.pipeline import BatchPipeline
from ..core.progress import CancelToken, ProgressCallback
from ..core.repo import discover_tasks
from ..core.report import write_report
from ..core.splitting import partition_tasks, subset_sizes


class DatasetService(IDatasetService):
    """Concrete implementation of dataset build service."""

    def __init__(self, image_service: IImageService, logger: ILogger):
        self._image_service = image_service
        self._logger = logger

    def build(self, config: BuildConfig, progress_cb: Optional[ProgressCallback] = None,
              cancel: Optional[CancelToken] = None) -> BuildSummary:
        """Build the dataset described by config.

        Raises ConfigError, DirectoryCreationError or ManifestError for
        run-level problems; per-image problems end up in the summary.
        """
        plan = config.to_plan()
        summary = BuildSummary(output_dir=plan.output_dir)

        self._logger.info("Scanning sources", sources=len(plan.sources))
        tasks = discover_tasks(plan.sources)
        if not tasks:
            self._logger.warning("No images found in any source directory")
            return summary

        tasks = partition_tasks(tasks, plan.train_ratio, plan.val_ratio, seed=plan.seed)
        sizes = subset_sizes(tasks)
        self._logger.info(f"Split {len(tasks)} images", **{s.value: n for s, n in sizes.items()})

        scaffold_output(plan.output_dir)

        pipeline = BatchPipeline(
            decode=self._image_service.load_image,
            probe=self._image_service.get_image_size,
            encode=self._image_service.encode_within_budget,
            max_workers=plan.max_workers,
        )
        summary.results = pipeline.run(tasks, plan, progress_cb=progress_cb, cancel=cancel)

        summary.manifest_path = write_manifest(plan.output_dir, plan.class_map)
        if plan.write_report:
            try:
                summary.report_path = write_report(plan.output_dir, plan, summary.results)
            except OSError as e:
                self._logger.error("Failed to write build report", exception=e)

        self._logger.info("Build finished", **summary.counts)
        return summary
