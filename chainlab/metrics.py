from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from chainlab.analysis import ChainAnalysis
from chainlab.model import path_to_string
from chainlab.stats import percentiles

DEFAULT_PERCENTILES = (50, 90, 99)


def summarize(
    analyses: Sequence[ChainAnalysis],
    *,
    percentile_points: Sequence[int] = DEFAULT_PERCENTILES,
) -> dict[str, Any]:
    chains: list[dict[str, Any]] = []
    for a in analyses:
        ex = a.extraction
        r = a.result
        chains.append(
            {
                "id": a.chain.id,
                "path": path_to_string(a.chain.path),
                "events": ex.event_count,
                "cycles": len(ex.response_times),
                "mismatches": ex.mismatch_count,
                "mismatch_ratio": ex.mismatch_ratio,
                "bcrt_us": r.bcrt_us if r else None,
                "acrt_us": r.acrt_us if r else None,
                "wcrt_us": r.wcrt_us if r else None,
                "response_time_us": percentiles(
                    list(ex.response_times), percentile_points
                ),
            }
        )

    return {
        "chains_total": len(analyses),
        "chains_with_results": sum(1 for a in analyses if a.result is not None),
        "events_total": sum(a.extraction.event_count for a in analyses),
        "mismatches_total": sum(a.extraction.mismatch_count for a in analyses),
        "chains": chains,
    }
