from __future__ import annotations
import json, datetime, platform
from pathlib import Path
from typing import Sequence

from .build_model import BuildPlan
from .pipeline import TaskOutcome, TaskResult, summarize
from .splitting import subset_sizes

REPORT_NAME = "build_report.json"

def write_report(out_root: Path, plan: BuildPlan, results: Sequence[TaskResult]) -> Path:
    rep = {
        "created_at": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "os": platform.platform(),
        "plan": plan.to_json(),
        "totals": {
            "tasks": len(results),
            "by_outcome": summarize(results),
            "by_subset": {s.value: n for s, n in subset_sizes([r.task for r in results]).items()},
            "boxes": sum(r.boxes for r in results),
        },
        "problems": [r.to_json() for r in results if r.outcome != TaskOutcome.SUCCESS],
    }
    reports = out_root / "reports"
    reports.mkdir(parents=True, exist_ok=True)
    path = reports / REPORT_NAME
    path.write_text(json.dumps(rep, indent=2), encoding="utf-8")
    return path
