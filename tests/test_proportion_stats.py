from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from provider_response_audit.proportion_stats import (
    low_power_mask,
    safe_rate_percent,
    wilson_interval,
)


def test_wilson_interval_returns_expected_shape_and_bounds() -> None:
    lower, upper = wilson_interval(
        successes=pd.Series([0, 5, 10]),
        totals=pd.Series([0, 10, 10]),
    )

    assert lower.shape == (3,)
    assert upper.shape == (3,)
    assert np.isnan(lower[0])
    assert np.isnan(upper[0])
    assert lower[1] == pytest.approx(0.2365930905, abs=1e-5)
    assert upper[1] == pytest.approx(0.7634069095, abs=1e-5)
    assert lower[2] <= upper[2]


def test_safe_rate_percent_defaults_to_zero_without_documents() -> None:
    rate = safe_rate_percent(
        successes=pd.Series([0, 1, 3, 2]),
        totals=pd.Series([0, 1, 4, np.nan]),
    )
    assert rate.tolist() == [0.0, 100.0, 75.0, 0.0]


def test_low_power_mask_flags_small_or_missing_totals() -> None:
    mask = low_power_mask(
        totals=pd.Series([0, 4, 5, np.nan, 45]),
        min_total=5,
    )
    assert mask.tolist() == [True, True, False, True, False]
