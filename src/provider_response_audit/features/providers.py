from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderRegistry:
    """Canonical provider names recognized by the analysis."""

    names: frozenset[str]

    @classmethod
    def from_names(cls, names: Iterable[str]) -> ProviderRegistry:
        return cls(names=frozenset(str(name) for name in names))

    def resolve(self, candidate: str | None) -> str | None:
        if candidate is None or candidate not in self.names:
            return None
        return candidate

    def __contains__(self, candidate: object) -> bool:
        return candidate in self.names

    def __len__(self) -> int:
        return len(self.names)
