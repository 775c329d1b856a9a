from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from provider_response_audit.calculators.stats import round_half_up


def build_cohort_summary(aggregates: pd.DataFrame) -> dict[str, Any]:
    """Totals across every aggregated provider, independent of the display limit."""
    if aggregates.empty:
        return {
            "total_providers": 0,
            "total_documents": 0,
            "responded_documents": 0,
            "response_rate_percent": 0.0,
            "average_response_time_days": 0.0,
        }

    total_documents = int(aggregates["total_documents"].sum())
    responded_documents = int(aggregates["responded_documents"].sum())
    all_samples = [value for samples in aggregates["duration_samples"] for value in samples]
    return {
        "total_providers": int(len(aggregates)),
        "total_documents": total_documents,
        "responded_documents": responded_documents,
        "response_rate_percent": (
            (responded_documents / total_documents) * 100.0 if total_documents else 0.0
        ),
        "average_response_time_days": (
            round_half_up(float(np.mean(all_samples)), decimals=1) if all_samples else 0.0
        ),
    }
