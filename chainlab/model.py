from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chainlab.validate import FormatError

# Catalog record field -> expected JSON kind. Order matches the record layout.
_CHAIN_FIELDS: dict[str, str] = {
    "ID": "int",
    "Prio": "int",
    "Path": "int_list",
    "Period_us": "int",
    "Utilisation": "number",
    "Random_seed": "int",
    "PPE": "bool",
    "Avg_len": "int",
    "Merge_p": "number",
    "Sync_p": "number",
    "Variance": "number",
}
_OPTIONAL_FIELDS: dict[str, str] = {"Executors": "int"}


def _is_kind(value: Any, kind: str) -> bool:
    if kind == "bool":
        return isinstance(value, bool)
    if kind == "int":
        return isinstance(value, int) and not isinstance(value, bool)
    if kind == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind == "int_list":
        return isinstance(value, list) and all(_is_kind(v, "int") for v in value)
    raise AssertionError(f"unhandled kind: {kind}")


def path_to_string(path: tuple[int, ...] | list[int]) -> str:
    return "{" + ",".join(str(n) for n in path) + "}"


@dataclass(frozen=True)
class Provenance:
    """How a chain was generated. Carried through analysis untouched."""

    random_seed: int
    ppe: bool
    avg_len: int
    merge_p: float
    sync_p: float
    variance: float
    # Only present in catalogs produced for capacity testing.
    executors: int | None = None


@dataclass(frozen=True)
class Chain:
    id: int
    prio: int
    path: tuple[int, ...]
    period_us: int
    utilisation: float
    provenance: Provenance

    @staticmethod
    def from_json(obj: Any) -> "Chain":
        if not isinstance(obj, dict):
            raise FormatError(f"chain record must be an object (got {type(obj).__name__})")

        unknown = sorted(set(obj) - set(_CHAIN_FIELDS) - set(_OPTIONAL_FIELDS))
        if unknown:
            raise FormatError(f"chain record has unknown field(s): {', '.join(unknown)}")

        for name, kind in _CHAIN_FIELDS.items():
            if name not in obj:
                raise FormatError(f"chain record is missing field '{name}'")
            if not _is_kind(obj[name], kind):
                raise FormatError(
                    f"chain field '{name}' has wrong type (expected {kind}, got {obj[name]!r})"
                )
        executors = obj.get("Executors")
        if executors is not None and not _is_kind(executors, "int"):
            raise FormatError(
                f"chain field 'Executors' has wrong type (expected int, got {executors!r})"
            )
        if obj["ID"] < 0:
            raise FormatError(f"chain field 'ID' must be >= 0 (got {obj['ID']})")

        return Chain(
            id=obj["ID"],
            prio=obj["Prio"],
            path=tuple(obj["Path"]),
            period_us=obj["Period_us"],
            utilisation=float(obj["Utilisation"]),
            provenance=Provenance(
                random_seed=obj["Random_seed"],
                ppe=obj["PPE"],
                avg_len=obj["Avg_len"],
                merge_p=float(obj["Merge_p"]),
                sync_p=float(obj["Sync_p"]),
                variance=float(obj["Variance"]),
                executors=executors,
            ),
        )

    def to_json(self) -> dict[str, Any]:
        p = self.provenance
        out: dict[str, Any] = {
            "ID": self.id,
            "Prio": self.prio,
            "Path": list(self.path),
            "Period_us": self.period_us,
            "Utilisation": self.utilisation,
            "Random_seed": p.random_seed,
            "PPE": p.ppe,
            "Avg_len": p.avg_len,
            "Merge_p": p.merge_p,
            "Sync_p": p.sync_p,
            "Variance": p.variance,
        }
        if p.executors is not None:
            out["Executors"] = p.executors
        return out


@dataclass(frozen=True)
class Event:
    executor: int
    chain: int
    # None when the log producer does not record callbacks (measured schema).
    callback: int | None
    start_us: int
    duration_us: int

    @property
    def end_us(self) -> int:
        return self.start_us + self.duration_us


@dataclass(frozen=True)
class Result:
    id: int
    bcrt_us: int
    acrt_us: int
    wcrt_us: int

    def as_dict(self) -> dict[str, int]:
        return {
            "ID": self.id,
            "BCRT_us": self.bcrt_us,
            "ACRT_us": self.acrt_us,
            "WCRT_us": self.wcrt_us,
        }
