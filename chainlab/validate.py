from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from chainlab.model import Chain


class FormatError(ValueError):
    """Input that does not match the catalog schema or the event-log grammar."""

    def __init__(
        self,
        reason: str,
        *,
        path: Path | str | None = None,
        line_no: int | None = None,
    ) -> None:
        self.reason = reason
        self.path = str(path) if path is not None else None
        self.line_no = line_no
        super().__init__(self._render())

    def _render(self) -> str:
        if self.path is None:
            return self.reason
        if self.line_no is None:
            return f"{self.path}: {self.reason}"
        return f"{self.path}:{self.line_no}: {self.reason}"

    def located(self, *, path: Path | str, line_no: int | None = None) -> "FormatError":
        return FormatError(self.reason, path=path, line_no=line_no)


class ConfigError(ValueError):
    pass


def validate_chain(chain: "Chain") -> None:
    if chain.id < 0:
        raise ConfigError(f"chain id must be >= 0 (got {chain.id})")
    if len(chain.path) < 1:
        raise ConfigError(f"chain {chain.id} has an empty path and cannot be analyzed")


def validate_catalog(chains: Sequence["Chain"]) -> None:
    seen: set[int] = set()
    for chain in chains:
        validate_chain(chain)
        if chain.id in seen:
            raise ConfigError(f"duplicate chain id {chain.id} in catalog")
        seen.add(chain.id)
