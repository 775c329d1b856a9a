from __future__ import annotations

from provider_response_audit.calculators.average_duration import AverageResponseTimeCalculator
from provider_response_audit.calculators.base import MetricCalculator
from provider_response_audit.calculators.boxplot import BoxplotCalculator
from provider_response_audit.calculators.response_rate import ResponseRateCalculator
from provider_response_audit.config import AppConfig


def default_calculators(config: AppConfig | None = None) -> list[MetricCalculator]:
    resolved = config or AppConfig()
    return [
        ResponseRateCalculator(
            min_total_for_power=resolved.rates.min_total_for_power,
            wilson_z=resolved.rates.wilson_z,
        ),
        AverageResponseTimeCalculator(),
        BoxplotCalculator(),
    ]
