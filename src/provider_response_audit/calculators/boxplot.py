from __future__ import annotations

import pandas as pd

from provider_response_audit.calculators.base import MetricCalculator, MetricResult
from provider_response_audit.calculators.stats import five_number_summary, tukey_outliers

BOXPLOT_COLUMNS = [
    "provider_name",
    "min",
    "q1",
    "median",
    "q3",
    "max",
    "lower_fence",
    "upper_fence",
    "sample_count",
]
OUTLIER_COLUMNS = ["provider_name", "days"]


class BoxplotCalculator(MetricCalculator):
    """Five-number summary per provider with Tukey-fence outliers.

    Only answered entries contribute. Quartiles use the nearest-rank (floor)
    index into the sorted samples; outliers are samples outside
    [q1 - 1.5*IQR, q3 + 1.5*IQR]. Rows are ordered by median, fastest first.
    """

    name = "boxplot"
    samples_column = "responded_samples"

    def run(self, aggregates: pd.DataFrame) -> MetricResult:
        rows: list[dict[str, object]] = []
        outlier_rows: list[dict[str, object]] = []
        for provider_name, samples in sorted(
            zip(aggregates["provider_name"], aggregates[self.samples_column])
        ):
            stats = five_number_summary(samples)
            if stats is None:
                continue
            rows.append({"provider_name": provider_name, **stats, "sample_count": len(samples)})
            outlier_rows.extend(
                {"provider_name": provider_name, "days": int(value)}
                for value in tukey_outliers(samples)
            )

        table = (
            pd.DataFrame(rows, columns=BOXPLOT_COLUMNS)
            .sort_values(["median", "provider_name"], kind="mergesort")
            .reset_index(drop=True)
        )
        outliers = pd.DataFrame(outlier_rows, columns=OUTLIER_COLUMNS)
        summary = {
            "providers": int(len(table)),
            "outliers": int(len(outliers)),
            "median_of_medians": float(table["median"].median()) if not table.empty else 0.0,
        }
        return MetricResult(
            metric=self.name,
            summary=summary,
            tables={"boxplot": table, "outliers": outliers},
        )
