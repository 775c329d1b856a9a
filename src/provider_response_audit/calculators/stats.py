from __future__ import annotations

from collections.abc import Sequence

import numpy as np

QUARTILE_PROBABILITIES = (0.25, 0.5, 0.75)
TUKEY_K = 1.5


def nearest_rank_quantiles(
    sorted_values: np.ndarray,
    probabilities: Sequence[float] = QUARTILE_PROBABILITIES,
) -> np.ndarray:
    """Pick `sorted_values[floor(n * p)]` for each probability (0-indexed)."""
    if sorted_values.size == 0:
        return np.full(len(probabilities), np.nan, dtype=float)
    n = sorted_values.size
    indices = np.floor(n * np.asarray(probabilities, dtype=float)).astype(int)
    indices = np.clip(indices, 0, n - 1)
    return sorted_values[indices].astype(float)


def tukey_fences(q1: float, q3: float, k: float = TUKEY_K) -> tuple[float, float]:
    iqr = q3 - q1
    return q1 - (k * iqr), q3 + (k * iqr)


def five_number_summary(samples: Sequence[int] | np.ndarray) -> dict[str, float] | None:
    """Min, nearest-rank quartiles and max plus the Tukey fences; None when empty."""
    values = np.sort(np.asarray(samples, dtype=float))
    if values.size == 0:
        return None
    q1, median, q3 = nearest_rank_quantiles(values)
    lower_fence, upper_fence = tukey_fences(float(q1), float(q3))
    return {
        "min": float(values[0]),
        "q1": float(q1),
        "median": float(median),
        "q3": float(q3),
        "max": float(values[-1]),
        "lower_fence": float(lower_fence),
        "upper_fence": float(upper_fence),
    }


def tukey_outliers(samples: Sequence[int] | np.ndarray, k: float = TUKEY_K) -> np.ndarray:
    """Samples strictly outside the Tukey fences, in ascending order."""
    values = np.sort(np.asarray(samples, dtype=float))
    if values.size == 0:
        return values
    q1, _median, q3 = nearest_rank_quantiles(values)
    lower_fence, upper_fence = tukey_fences(float(q1), float(q3), k=k)
    return values[(values < lower_fence) | (values > upper_fence)]


def round_half_up(value: float, decimals: int = 1) -> float:
    scale = 10.0**decimals
    return float(np.floor((value * scale) + 0.5) / scale)
