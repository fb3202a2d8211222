from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from chainlab.model import Chain, Provenance
from chainlab.validate import ConfigError, FormatError


def load_chains(path: Path) -> list[Chain]:
    """Read a chain catalog (a JSON array of chain records).

    Raises OSError when the file cannot be read and FormatError when its
    content does not match the chain schema.
    """

    text = Path(path).read_text(encoding="utf-8")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"not valid JSON: {e}", path=path) from e

    if not isinstance(raw, list):
        raise FormatError("catalog must be a JSON array of chain records", path=path)

    chains: list[Chain] = []
    for index, record in enumerate(raw):
        try:
            chains.append(Chain.from_json(record))
        except FormatError as e:
            raise FormatError(f"record {index}: {e.reason}", path=path) from e
    return chains


def save_chains(chains: Sequence[Chain], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = [c.to_json() for c in chains]
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def build_chains(
    path: Path,
    *,
    ids: Sequence[int],
    periods: Sequence[int],
    priorities: Sequence[int],
    paths: Sequence[Sequence[int]],
    utilisations: Sequence[float],
    provenance: Provenance,
) -> list[Chain]:
    columns = {
        "ids": len(ids),
        "periods": len(periods),
        "priorities": len(priorities),
        "paths": len(paths),
        "utilisations": len(utilisations),
    }
    if len(set(columns.values())) != 1:
        sizes = ", ".join(f"{k}={v}" for k, v in columns.items())
        raise ConfigError(f"chain columns must have equal lengths ({sizes})")

    chains = [
        Chain(
            id=int(chain_id),
            prio=int(prio),
            path=tuple(int(cb) for cb in cb_path),
            period_us=int(period),
            utilisation=float(u),
            provenance=provenance,
        )
        for chain_id, period, prio, cb_path, u in zip(
            ids, periods, priorities, paths, utilisations
        )
    ]
    save_chains(chains, path)
    return chains
