from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from chainlab.model import Chain, Event, path_to_string
from chainlab.parser import CALLBACK_SCHEMA, MEASURED_SCHEMA, EventSchema
from chainlab.validate import ConfigError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extraction:
    chain_id: int
    event_count: int
    mismatch_count: int
    response_times: tuple[int, ...]

    @property
    def mismatch_ratio(self) -> float:
        if self.event_count == 0:
            return 0.0
        return self.mismatch_count / self.event_count


class ExtractionStrategy(Protocol):
    def extract(
        self,
        chain: Chain,
        events: Sequence[Event],
        *,
        logger: logging.Logger | None = None,
    ) -> Extraction:
        raise NotImplementedError


@dataclass(frozen=True)
class PathMatchingStrategy:
    """Rebuild response times by walking the chain's path cyclically.

    Events are assumed to be in execution order. Every completed traversal of
    the path yields one response time, from the start of its first event to
    the end of its last. Callbacks that differ from the expected path position
    are counted but otherwise treated like any other event.
    """

    def extract(
        self,
        chain: Chain,
        events: Sequence[Event],
        *,
        logger: logging.Logger | None = None,
    ) -> Extraction:
        log = logger or _logger
        path = chain.path
        n = len(path)
        if n == 0:
            raise ConfigError(f"chain {chain.id} has an empty path and cannot be analyzed")

        mismatches = 0
        response_times: list[int] = []
        for i, event in enumerate(events):
            expected = path[i % n]
            if event.callback != expected:
                log.debug(
                    "chain %d event %d: expected callback %d, got %s",
                    chain.id,
                    i,
                    expected,
                    event.callback,
                )
                mismatches += 1

            if (i + 1) % n == 0:
                first = events[i - n + 1]
                response_times.append(event.end_us - first.start_us)

        if mismatches:
            log.warning(
                "chain %d %s: %d/%d events did not occur as expected (%.1f%%)",
                chain.id,
                path_to_string(path),
                mismatches,
                len(events),
                100.0 * mismatches / len(events),
            )

        return Extraction(
            chain_id=chain.id,
            event_count=len(events),
            mismatch_count=mismatches,
            response_times=tuple(response_times),
        )


@dataclass(frozen=True)
class MeasuredDurationStrategy:
    """Treat every event as one complete end-to-end measurement."""

    def extract(
        self,
        chain: Chain,
        events: Sequence[Event],
        *,
        logger: logging.Logger | None = None,
    ) -> Extraction:
        return Extraction(
            chain_id=chain.id,
            event_count=len(events),
            mismatch_count=0,
            response_times=tuple(e.duration_us for e in events),
        )


def strategy_for_schema(schema: EventSchema) -> ExtractionStrategy:
    if schema == CALLBACK_SCHEMA:
        return PathMatchingStrategy()
    if schema == MEASURED_SCHEMA:
        return MeasuredDurationStrategy()
    raise ValueError(f"Unsupported event schema: {schema.name}")
