from __future__ import annotations

import json
from pathlib import Path

import pytest

from chainlab.catalog import build_chains, load_chains, save_chains
from chainlab.model import Chain, Provenance, path_to_string
from chainlab.validate import ConfigError, FormatError

from conftest import PROVENANCE, make_chain


def _record(**overrides: object) -> dict:
    rec = {
        "ID": 0,
        "Prio": 3,
        "Path": [1, 2, 3],
        "Period_us": 5000,
        "Utilisation": 0.1,
        "Random_seed": 7,
        "PPE": True,
        "Avg_len": 3,
        "Merge_p": 0.0,
        "Sync_p": 0.0,
        "Variance": 0.0,
    }
    rec.update(overrides)
    return rec


def test_save_then_load_reproduces_chains(tmp_path: Path) -> None:
    chains = [
        make_chain(4, (9, 8)),
        make_chain(0, (1, 2, 3), prio=7),
        Chain(
            id=2,
            prio=0,
            path=(5,),
            period_us=250,
            utilisation=0.75,
            provenance=Provenance(
                random_seed=1,
                ppe=True,
                avg_len=1,
                merge_p=0.1,
                sync_p=0.2,
                variance=0.3,
                executors=4,
            ),
        ),
    ]
    path = tmp_path / "out" / "chains.json"
    save_chains(chains, path)
    assert load_chains(path) == chains


def test_catalog_uses_external_field_names(tmp_path: Path) -> None:
    path = tmp_path / "chains.json"
    save_chains([make_chain(1, (1, 2))], path)
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert list(raw[0]) == [
        "ID",
        "Prio",
        "Path",
        "Period_us",
        "Utilisation",
        "Random_seed",
        "PPE",
        "Avg_len",
        "Merge_p",
        "Sync_p",
        "Variance",
    ]


def test_load_accepts_optional_executors_field(tmp_path: Path) -> None:
    path = tmp_path / "chains.json"
    path.write_text(json.dumps([_record(Executors=2)]), encoding="utf-8")
    (chain,) = load_chains(path)
    assert chain.provenance.executors == 2
    assert chain.path == (1, 2, 3)


def test_load_missing_file_raises_oserror(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        load_chains(tmp_path / "nope.json")


@pytest.mark.parametrize(
    "content, match",
    [
        ("{not json", "not valid JSON"),
        (json.dumps({"ID": 0}), "JSON array"),
        (json.dumps([_record(Extra=1)]), "unknown field"),
        (json.dumps([{k: v for k, v in _record().items() if k != "Prio"}]), "missing field 'Prio'"),
        (json.dumps([_record(Path=[1, "2"])]), "'Path' has wrong type"),
        (json.dumps([_record(Period_us=True)]), "'Period_us' has wrong type"),
        (json.dumps([_record(PPE=1)]), "'PPE' has wrong type"),
        (json.dumps([_record(ID=-1)]), "'ID' must be >= 0"),
        (json.dumps([_record(), 3]), "record 1"),
    ],
)
def test_load_rejects_schema_mismatch(tmp_path: Path, content: str, match: str) -> None:
    path = tmp_path / "chains.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(FormatError, match=match) as exc:
        load_chains(path)
    assert exc.value.path == str(path)


def test_build_chains_zips_columns_and_saves(tmp_path: Path) -> None:
    path = tmp_path / "built.json"
    chains = build_chains(
        path,
        ids=[0, 1],
        periods=[1000, 2000],
        priorities=[2, 1],
        paths=[[1, 2], [3]],
        utilisations=[0.1, 0.4],
        provenance=PROVENANCE,
    )
    assert [c.id for c in chains] == [0, 1]
    assert chains[0].path == (1, 2)
    assert chains[1].prio == 1
    assert all(c.provenance is PROVENANCE for c in chains)
    assert load_chains(path) == chains


def test_build_chains_rejects_mismatched_columns(tmp_path: Path) -> None:
    path = tmp_path / "built.json"
    with pytest.raises(ConfigError, match="equal lengths"):
        build_chains(
            path,
            ids=[0, 1],
            periods=[1000],
            priorities=[2, 1],
            paths=[[1, 2], [3]],
            utilisations=[0.1, 0.4],
            provenance=PROVENANCE,
        )
    assert not path.exists()


def test_path_to_string() -> None:
    assert path_to_string((1, 2, 3)) == "{1,2,3}"
    assert path_to_string([]) == "{}"
