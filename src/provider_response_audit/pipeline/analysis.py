from __future__ import annotations

import logging
from collections.abc import Collection, Sequence
from dataclasses import asdict, dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from provider_response_audit.calculators.average_duration import rank_by_average
from provider_response_audit.calculators.base import (
    BoxplotSummary,
    MetricCalculator,
    MetricResult,
    Outlier,
    ProviderMetrics,
)
from provider_response_audit.calculators.registry import default_calculators
from provider_response_audit.calculators.summary import build_cohort_summary
from provider_response_audit.config import (
    AppConfig,
    FilterConfig,
    ProviderLimit,
    SubjectCatalog,
    TableFormat,
)
from provider_response_audit.features.aggregates import aggregate_by_provider
from provider_response_audit.features.classify import classify_records
from provider_response_audit.features.demand import (
    DemandCount,
    apply_provider_limit,
    demand_table,
    limit_providers,
    limit_subtitle,
    rank_demand,
)
from provider_response_audit.features.expand import expand_recipients
from provider_response_audit.features.providers import ProviderRegistry
from provider_response_audit.features.subjects import allowed_subjects, filter_subtitle
from provider_response_audit.io.schema import CorrespondenceRecord
from provider_response_audit.io.write import DEFAULT_TABLE_FORMAT, write_summary, write_table
from provider_response_audit.paths import build_output_paths
from provider_response_audit.preprocess.dates import to_reference_timestamp

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    provider_metrics: tuple[ProviderMetrics, ...]
    demand: tuple[DemandCount, ...]
    tables: dict[str, pd.DataFrame]
    summary: dict[str, Any]


def _provider_metrics(
    aggregates: pd.DataFrame,
    results: dict[str, MetricResult],
) -> list[ProviderMetrics]:
    rates = results["response_rate"].tables["response_rate"].set_index("provider_name")
    averages = (
        results["average_response_time"]
        .tables["average_response_time"]
        .set_index("provider_name")["average_response_time_days"]
    )
    boxplots = results["boxplot"].tables["boxplot"].set_index("provider_name")
    outliers = results["boxplot"].tables["outliers"]

    metrics: list[ProviderMetrics] = []
    for row in aggregates.sort_values("provider_name").itertuples(index=False):
        name = str(row.provider_name)
        boxplot = None
        if name in boxplots.index:
            stats = boxplots.loc[name]
            boxplot = BoxplotSummary(
                min=float(stats["min"]),
                q1=float(stats["q1"]),
                median=float(stats["median"]),
                q3=float(stats["q3"]),
                max=float(stats["max"]),
            )
        provider_outliers = tuple(
            Outlier(provider_name=name, days=int(days))
            for days in outliers.loc[outliers["provider_name"] == name, "days"]
        )
        metrics.append(
            ProviderMetrics(
                provider_name=name,
                total_documents=int(row.total_documents),
                responded_documents=int(row.responded_documents),
                not_responded_documents=int(row.not_responded_documents),
                response_rate_percent=float(rates.loc[name, "response_rate_percent"]),
                average_response_time_days=float(averages.get(name, 0.0)),
                boxplot=boxplot,
                outliers=provider_outliers,
            )
        )
    return metrics


def _empty_result(
    filters: FilterConfig,
    limit: ProviderLimit,
    calculators: Sequence[MetricCalculator],
) -> AnalysisResult:
    empty = aggregate_by_provider([], now=pd.Timestamp(0))
    tables: dict[str, pd.DataFrame] = {"demand": demand_table([])}
    for calculator in calculators:
        tables.update(calculator.run(empty).tables)
    return AnalysisResult(
        provider_metrics=(),
        demand=(),
        tables=tables,
        summary={
            "filter": filter_subtitle(filters),
            "limit": limit_subtitle(limit),
            "cohort": build_cohort_summary(empty),
            "metrics": {},
        },
    )


def run_analysis(
    records: Sequence[CorrespondenceRecord],
    registry: ProviderRegistry,
    filters: FilterConfig,
    limit: ProviderLimit,
    now: date | datetime | pd.Timestamp,
    *,
    catalog: SubjectCatalog | None = None,
    years: Collection[str] = (),
    calculators: Sequence[MetricCalculator] | None = None,
) -> AnalysisResult:
    """Compute per-provider response metrics for one set of inputs.

    Pure over its arguments: the same records, registry, filters, limit and
    `now` always produce the same result.
    """
    resolved_calculators = list(calculators) if calculators is not None else default_calculators()
    subjects = allowed_subjects(filters, catalog)
    if not subjects:
        LOGGER.info("No subject filter active; returning an empty analysis")
        return _empty_result(filters, limit, resolved_calculators)

    eligible = classify_records(records, subjects, years=years)
    entries = expand_recipients(eligible, registry)
    ranking = rank_demand(entries)
    aggregates = aggregate_by_provider(entries, now=now)

    results = {calculator.name: calculator.run(aggregates) for calculator in resolved_calculators}

    tables: dict[str, pd.DataFrame] = {
        "demand": apply_provider_limit(demand_table(ranking), limit, ranking),
    }
    for result in results.values():
        for table_name, table in result.tables.items():
            tables[table_name] = apply_provider_limit(table, limit, ranking)

    provider_metrics: list[ProviderMetrics] = []
    if {"response_rate", "average_response_time", "boxplot"} <= set(results):
        provider_metrics = limit_providers(_provider_metrics(aggregates, results), limit, ranking)

    summary: dict[str, Any] = {
        "filter": filter_subtitle(filters),
        "limit": limit_subtitle(limit),
        "cohort": build_cohort_summary(aggregates),
        "metrics": {name: result.summary for name, result in results.items()},
    }
    if "average_response_time" in results:
        fastest, slowest = rank_by_average(
            results["average_response_time"].tables["average_response_time"]
        )
        summary["fastest_providers"] = fastest["provider_name"].tolist()
        summary["slowest_providers"] = slowest["provider_name"].tolist()

    LOGGER.info(
        "Analyzed %d eligible records into %d provider entries across %d providers",
        len(eligible),
        len(entries),
        len(aggregates),
    )
    return AnalysisResult(
        provider_metrics=tuple(provider_metrics),
        demand=tuple(limit_providers(ranking, limit, ranking)),
        tables=tables,
        summary=summary,
    )


def run_configured_analysis(
    records: Sequence[CorrespondenceRecord],
    registry: ProviderRegistry,
    config: AppConfig,
    now: date | datetime | pd.Timestamp,
) -> AnalysisResult:
    return run_analysis(
        records,
        registry,
        config.filters,
        config.limit,
        now,
        catalog=config.subjects,
        years=config.years,
        calculators=default_calculators(config),
    )


def write_analysis(
    result: AnalysisResult,
    out_dir: Path,
    *,
    fmt: TableFormat = DEFAULT_TABLE_FORMAT,
    now: date | datetime | pd.Timestamp | None = None,
) -> dict[str, Path]:
    paths = build_output_paths(out_dir)
    written: dict[str, Path] = {}
    for table_name, table in result.tables.items():
        written[table_name] = write_table(table, paths.tables / f"{table_name}.{fmt}", fmt=fmt)

    payload: dict[str, Any] = {
        **result.summary,
        "provider_metrics": [asdict(item) for item in result.provider_metrics],
        "demand": [asdict(item) for item in result.demand],
    }
    if now is not None:
        payload["reference_time"] = to_reference_timestamp(now).isoformat()
    written["summary"] = write_summary(payload, paths.summary / "summary.json")
    return written
