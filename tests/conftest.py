from __future__ import annotations

import sys
from pathlib import Path

import pytest

from chainlab.model import Chain, Event, Provenance


@pytest.fixture(scope="session", autouse=True)
def _add_repo_root_to_syspath() -> None:
    """Make the local package importable when running tests from `tests/`."""

    root = Path(__file__).resolve().parents[1]
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


PROVENANCE = Provenance(
    random_seed=42,
    ppe=False,
    avg_len=3,
    merge_p=0.25,
    sync_p=0.5,
    variance=1.5,
)


def make_chain(chain_id: int, path: tuple[int, ...], *, prio: int = 1) -> Chain:
    return Chain(
        id=chain_id,
        prio=prio,
        path=path,
        period_us=1000,
        utilisation=0.2,
        provenance=PROVENANCE,
    )


def ev(chain: int, callback: int | None, start: int, duration: int, executor: int = 0) -> Event:
    return Event(
        executor=executor,
        chain=chain,
        callback=callback,
        start_us=start,
        duration_us=duration,
    )


@pytest.fixture
def worked_chain() -> Chain:
    return make_chain(0, (1, 2, 3))


@pytest.fixture
def worked_events() -> list[Event]:
    return [
        ev(0, 1, 0, 10),
        ev(0, 2, 10, 5),
        ev(0, 3, 15, 20),
        ev(0, 1, 40, 5),
        ev(0, 2, 50, 5),
        ev(0, 3, 60, 10),
    ]
