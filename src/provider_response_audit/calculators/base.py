from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class MetricResult:
    metric: str
    summary: dict[str, Any]
    tables: dict[str, pd.DataFrame]


@dataclass(frozen=True)
class BoxplotSummary:
    min: float
    q1: float
    median: float
    q3: float
    max: float


@dataclass(frozen=True)
class Outlier:
    provider_name: str
    days: int


@dataclass(frozen=True)
class ProviderMetrics:
    provider_name: str
    total_documents: int
    responded_documents: int
    not_responded_documents: int
    response_rate_percent: float
    average_response_time_days: float
    boxplot: BoxplotSummary | None = None
    outliers: tuple[Outlier, ...] = field(default_factory=tuple)


class MetricCalculator:
    name: str
    samples_column: str = "duration_samples"

    def run(self, aggregates: pd.DataFrame) -> MetricResult:
        raise NotImplementedError
