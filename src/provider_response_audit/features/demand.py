from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from operator import attrgetter
from typing import TypeVar

import pandas as pd

from provider_response_audit.config import ProviderLimit
from provider_response_audit.features.expand import ExpandedEntry

T = TypeVar("T")


@dataclass(frozen=True)
class DemandCount:
    provider_name: str
    count: int


def rank_demand(entries: Sequence[ExpandedEntry]) -> list[DemandCount]:
    """Count sent letters per provider, most requested first.

    Equal counts are ordered by provider name so the top-N cut is stable.
    """
    counts = Counter(entry.provider_name for entry in entries if entry.sent_date is not None)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [DemandCount(provider_name=name, count=count) for name, count in ranked]


def demand_table(ranking: Sequence[DemandCount]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "rank": list(range(1, len(ranking) + 1)),
            "provider_name": [item.provider_name for item in ranking],
            "count": [item.count for item in ranking],
        }
    )


def top_provider_names(
    ranking: Sequence[DemandCount],
    limit: ProviderLimit,
) -> frozenset[str] | None:
    if limit == "all":
        return None
    return frozenset(item.provider_name for item in ranking[: int(limit)])


def apply_provider_limit(
    table: pd.DataFrame,
    limit: ProviderLimit,
    ranking: Sequence[DemandCount],
    *,
    column: str = "provider_name",
) -> pd.DataFrame:
    """Keep rows for the top-N providers by demand, preserving the table's own order."""
    allowed = top_provider_names(ranking, limit)
    if allowed is None:
        return table
    return table[table[column].isin(allowed)].reset_index(drop=True)


def limit_providers(
    items: Sequence[T],
    limit: ProviderLimit,
    ranking: Sequence[DemandCount],
    *,
    key: Callable[[T], str] = attrgetter("provider_name"),
) -> list[T]:
    allowed = top_provider_names(ranking, limit)
    if allowed is None:
        return list(items)
    return [item for item in items if key(item) in allowed]


def limit_subtitle(limit: ProviderLimit) -> str:
    if limit == "all":
        return "All providers"
    return f"Top {int(limit)} most requested providers"
