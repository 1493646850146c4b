from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .core.errors import ConfigError, DatasetPrepError
from .core.progress import Progress
from .services import (
    IConfigService, IDatasetService, ILogger, IReviewService, LogLevel,
    configure_services, get_service,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="yolo-prep", description="Build YOLO datasets from annotated images.")
    parser.add_argument("--log-file", type=Path, default=None, help="also write a debug log here")
    parser.add_argument("--config-dir", type=Path, default=None, help="where persisted defaults live")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p_build = sub.add_parser("build", help="convert sources described by a job file")
    p_build.add_argument("job", type=Path, help="YAML or JSON build job")
    p_build.add_argument("--seed", type=int, default=None, help="fix the train/val/test shuffle")

    p_review = sub.add_parser("review-list", help="list images and box counts of a built dataset")
    p_review.add_argument("dataset", type=Path)
    return parser


def setup_services(args: argparse.Namespace) -> None:
    """Set up the service container with all dependencies."""
    level = LogLevel.DEBUG if args.verbose else LogLevel.INFO
    configure_services(log_file=args.log_file, config_dir=args.config_dir, console_level=level)


def _progress_logger(logger: ILogger):
    last = {"tenth": -1}

    def on_progress(p: Progress) -> None:
        tenth = int(p.fraction * 10)
        if tenth != last["tenth"]:
            last["tenth"] = tenth
            logger.info(f"Progress {p.value}/{p.total} ({p.fraction * 100:.0f}%)")

    return on_progress


def run_build(args: argparse.Namespace) -> int:
    logger = get_service(ILogger)
    config_service = get_service(IConfigService)
    dataset_service = get_service(IDatasetService)

    config = config_service.load_build_config(args.job)
    if args.seed is not None:
        config = config.model_copy(update={"seed": args.seed})

    summary = dataset_service.build(config, progress_cb=_progress_logger(logger))
    counts = summary.counts
    logger.info(
        f"Done: {counts['success']} converted, {counts['skipped']} skipped, {counts['failed']} failed"
    )
    if summary.manifest_path:
        logger.info(f"Manifest: {summary.manifest_path}")
    return 0


def run_review_list(args: argparse.Namespace) -> int:
    review = get_service(IReviewService)
    for item in review.list_items(args.dataset):
        print(f"{item.title}\t{len(review.load_boxes(item))} boxes")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    setup_services(args)
    logger = get_service(ILogger)

    try:
        if args.command == "build":
            return run_build(args)
        return run_review_list(args)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    except DatasetPrepError as e:
        logger.error("Build aborted", exception=e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
