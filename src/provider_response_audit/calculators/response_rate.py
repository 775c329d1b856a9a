from __future__ import annotations

import pandas as pd

from provider_response_audit.calculators.base import MetricCalculator, MetricResult
from provider_response_audit.proportion_stats import (
    DEFAULT_LOW_POWER_MIN_TOTAL,
    low_power_mask,
    safe_rate_percent,
    wilson_interval,
)

RESPONSE_RATE_COLUMNS = [
    "provider_name",
    "total_documents",
    "responded_documents",
    "not_responded_documents",
    "response_rate_percent",
    "response_rate_wilson_low",
    "response_rate_wilson_high",
    "is_low_power",
]


class ResponseRateCalculator(MetricCalculator):
    name = "response_rate"

    def __init__(
        self,
        *,
        min_total_for_power: int = DEFAULT_LOW_POWER_MIN_TOTAL,
        wilson_z: float = 1.96,
    ) -> None:
        self.min_total_for_power = max(1, int(min_total_for_power))
        self.wilson_z = float(wilson_z)

    def run(self, aggregates: pd.DataFrame) -> MetricResult:
        if aggregates.empty:
            table = pd.DataFrame(columns=RESPONSE_RATE_COLUMNS)
            return MetricResult(
                metric=self.name,
                summary={"providers": 0, "overall_response_rate_percent": 0.0},
                tables={"response_rate": table},
            )

        table = aggregates[
            ["provider_name", "total_documents", "responded_documents", "not_responded_documents"]
        ].copy()
        table["response_rate_percent"] = safe_rate_percent(
            successes=table["responded_documents"],
            totals=table["total_documents"],
        )
        low, high = wilson_interval(
            successes=table["responded_documents"],
            totals=table["total_documents"],
            z=self.wilson_z,
        )
        table["response_rate_wilson_low"] = low * 100.0
        table["response_rate_wilson_high"] = high * 100.0
        table["is_low_power"] = low_power_mask(
            totals=table["total_documents"],
            min_total=self.min_total_for_power,
        )
        table = table.sort_values("provider_name", ascending=False).reset_index(drop=True)

        total = int(table["total_documents"].sum())
        responded = int(table["responded_documents"].sum())
        summary = {
            "providers": int(len(table)),
            "overall_response_rate_percent": (
                float(safe_rate_percent([responded], [total])[0]) if total else 0.0
            ),
            "low_power_providers": int(table["is_low_power"].sum()),
        }
        return MetricResult(
            metric=self.name,
            summary=summary,
            tables={"response_rate": table[RESPONSE_RATE_COLUMNS]},
        )
