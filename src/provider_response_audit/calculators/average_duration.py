from __future__ import annotations

import numpy as np
import pandas as pd

from provider_response_audit.calculators.base import MetricCalculator, MetricResult
from provider_response_audit.calculators.stats import round_half_up

AVERAGE_COLUMNS = ["provider_name", "average_response_time_days", "sample_count"]


def mean_days(samples: tuple[int, ...]) -> float:
    if not samples:
        return 0.0
    return round_half_up(float(np.mean(np.asarray(samples, dtype=float))), decimals=1)


class AverageResponseTimeCalculator(MetricCalculator):
    name = "average_response_time"

    def run(self, aggregates: pd.DataFrame) -> MetricResult:
        with_samples = aggregates[aggregates[self.samples_column].map(len) > 0].copy()
        if with_samples.empty:
            return MetricResult(
                metric=self.name,
                summary={"providers": 0, "overall_average_days": 0.0},
                tables={"average_response_time": pd.DataFrame(columns=AVERAGE_COLUMNS)},
            )

        with_samples["average_response_time_days"] = with_samples[self.samples_column].map(mean_days)
        with_samples["sample_count"] = with_samples[self.samples_column].map(len).astype(int)
        table = with_samples.sort_values("provider_name").reset_index(drop=True)[AVERAGE_COLUMNS]

        all_samples = [value for samples in with_samples[self.samples_column] for value in samples]
        summary = {
            "providers": int(len(table)),
            "overall_average_days": round_half_up(float(np.mean(all_samples)), decimals=1),
        }
        return MetricResult(
            metric=self.name,
            summary=summary,
            tables={"average_response_time": table},
        )


def rank_by_average(
    average_table: pd.DataFrame,
    size: int = 3,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Return the fastest and the slowest providers by average response time."""
    if average_table.empty:
        return average_table.copy(), average_table.copy()
    ordered = average_table.sort_values(
        ["average_response_time_days", "provider_name"],
        kind="mergesort",
    ).reset_index(drop=True)
    fastest = ordered.head(size).reset_index(drop=True)
    slowest = ordered.tail(size).iloc[::-1].reset_index(drop=True)
    return fastest, slowest
