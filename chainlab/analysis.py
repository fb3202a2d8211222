from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from chainlab.executors import ChainExecutor, SerialExecutor
from chainlab.extract import Extraction, ExtractionStrategy, PathMatchingStrategy
from chainlab.model import Chain, Event, Result
from chainlab.stats import aggregate_response_times
from chainlab.validate import validate_catalog

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainAnalysis:
    chain: Chain
    extraction: Extraction
    result: Result | None


def events_by_chain(events: Sequence[Event]) -> dict[int, list[Event]]:
    grouped: dict[int, list[Event]] = {}
    for event in events:
        grouped.setdefault(event.chain, []).append(event)
    return grouped


def analyze_chain(
    chain: Chain,
    events: Sequence[Event],
    *,
    strategy: ExtractionStrategy | None = None,
    logger: logging.Logger | None = None,
) -> ChainAnalysis:
    """Analyze one chain. `events` must already be limited to that chain."""

    log = logger or _logger
    strategy = strategy or PathMatchingStrategy()

    log.info("analyzing chain %d (%d events)", chain.id, len(events))
    extraction = strategy.extract(chain, events, logger=logger)
    result = aggregate_response_times(chain.id, extraction.response_times, logger=logger)
    return ChainAnalysis(chain=chain, extraction=extraction, result=result)


def analyze_chains(
    chains: Sequence[Chain],
    events: Sequence[Event],
    *,
    strategy: ExtractionStrategy | None = None,
    executor: ChainExecutor | None = None,
    logger: logging.Logger | None = None,
) -> list[ChainAnalysis]:
    validate_catalog(chains)
    executor = executor or SerialExecutor()
    grouped = events_by_chain(events)

    def _one(chain: Chain) -> ChainAnalysis:
        return analyze_chain(
            chain, grouped.get(chain.id, []), strategy=strategy, logger=logger
        )

    return executor.map_ordered(_one, chains)


def analyze(
    chains: Sequence[Chain],
    events: Sequence[Event],
    *,
    strategy: ExtractionStrategy | None = None,
    executor: ChainExecutor | None = None,
    logger: logging.Logger | None = None,
) -> list[Result]:
    """Compute BCRT/ACRT/WCRT for every chain, in catalog order.

    Chains without a single completed cycle produce no Result, so the output
    may be shorter than `chains`.
    """

    analyses = analyze_chains(
        chains, events, strategy=strategy, executor=executor, logger=logger
    )
    return [a.result for a in analyses if a.result is not None]
