from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, TextIO

from chainlab.model import Result

RESULT_COLUMNS = ["ID", "BCRT_us", "ACRT_us", "WCRT_us"]


def write_summary_json(path: Path, summary: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, indent=2, sort_keys=True), encoding="utf-8")


def write_results_json(path: Path, results: Sequence[Result]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    data = [r.as_dict() for r in results]
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def write_results_csv(path: Path, results: Sequence[Result]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(RESULT_COLUMNS)
        for r in results:
            w.writerow([r.id, r.bcrt_us, r.acrt_us, r.wcrt_us])


def print_results_table(results: Sequence[Result], out: TextIO) -> None:
    widths = [max(len(c), 10) for c in RESULT_COLUMNS]
    out.write("  ".join(c.rjust(w) for c, w in zip(RESULT_COLUMNS, widths)) + "\n")
    for r in results:
        row = [r.id, r.bcrt_us, r.acrt_us, r.wcrt_us]
        out.write("  ".join(str(v).rjust(w) for v, w in zip(row, widths)) + "\n")
