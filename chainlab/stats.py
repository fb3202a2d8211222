from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from chainlab.model import Result

_logger = logging.getLogger(__name__)


def aggregate_response_times(
    chain_id: int,
    response_times: Sequence[int],
    *,
    logger: logging.Logger | None = None,
) -> Result | None:
    """Reduce one chain's response times to best/average/worst case.

    The average is the floor of the integer mean. Returns None (and logs a
    warning) when there is nothing to reduce.
    """

    if len(response_times) == 0:
        (logger or _logger).warning("no response times computed for chain %d", chain_id)
        return None

    # Object dtype keeps Python ints, so sums of large timestamps cannot wrap.
    values = np.asarray(response_times, dtype=object)
    return Result(
        id=chain_id,
        bcrt_us=int(values.min()),
        acrt_us=int(values.sum()) // len(values),
        wcrt_us=int(values.max()),
    )


def percentiles(values: Sequence[int], ps: Sequence[int]) -> dict[str, float]:
    if len(values) == 0:
        return {f"p{p}": math.nan for p in ps}
    arr = np.asarray(values, dtype=np.float64)
    # numpy's default "linear" method.
    got = np.percentile(arr, list(ps))
    return {f"p{p}": float(v) for p, v in zip(ps, got)}
