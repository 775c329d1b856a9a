from __future__ import annotations

from pathlib import Path

import pandas as pd
import typer

from provider_response_audit.config import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    parse_provider_limit,
)
from provider_response_audit.features.subjects import allowed_subjects, filter_subtitle
from provider_response_audit.io.read import load_records, load_registry
from provider_response_audit.logging import configure_logging
from provider_response_audit.pipeline.analysis import run_configured_analysis, write_analysis

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _parse_now(now: str | None) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now()
    try:
        parsed = pd.Timestamp(now)
    except ValueError as exc:
        raise typer.BadParameter(f"--now must be an ISO date or datetime, got {now!r}") from exc
    if pd.isna(parsed):
        raise typer.BadParameter(f"--now must be an ISO date or datetime, got {now!r}")
    return parsed


def _apply_overrides(
    cfg: AppConfig,
    *,
    registry: Path | None,
    limit: str | None,
    judicial: bool | None,
    administrative: bool | None,
    years: list[str] | None,
) -> AppConfig:
    if registry is not None:
        cfg.registry.path = str(registry)
    if limit is not None:
        try:
            cfg.limit = parse_provider_limit(limit)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
    toggles: dict[str, bool] = {}
    if judicial is not None:
        toggles["judicial_decision"] = judicial
    if administrative is not None:
        toggles["administrative"] = administrative
    if toggles:
        cfg.filters = cfg.filters.model_copy(update=toggles)
    if years:
        cfg.years = [str(year) for year in years]
    return cfg


@app.command()
def analyze(
    records: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    registry: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Provider registry CSV; overrides registry.path from the config.",
    ),
    now: str | None = typer.Option(
        None, help="Reference time for pending letters (ISO); defaults to the current time."
    ),
    limit: str | None = typer.Option(None, help="Top-N providers by demand, or 'all'."),
    judicial: bool | None = typer.Option(None, "--judicial/--no-judicial"),
    administrative: bool | None = typer.Option(None, "--administrative/--no-administrative"),
    year: list[str] | None = typer.Option(None, "--year", help="Restrict to sent years."),
) -> None:
    """Compute provider response metrics and write tables plus a JSON summary."""
    configure_logging()
    cfg = _apply_overrides(
        _load_app_config(config),
        registry=registry,
        limit=limit,
        judicial=judicial,
        administrative=administrative,
        years=year,
    )
    reference = _parse_now(now)
    result = run_configured_analysis(
        load_records(records, cfg),
        load_registry(cfg.registry.path),
        cfg,
        reference,
    )
    written = write_analysis(result, out, fmt=cfg.outputs.tables_format, now=reference)
    typer.echo(
        f"Analysis complete. Providers: {len(result.provider_metrics)}. "
        f"Outputs: {', '.join(sorted(written.keys()))}"
    )


@app.command()
def demand(
    records: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    registry: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    limit: str | None = typer.Option(None, help="Top-N providers by demand, or 'all'."),
    judicial: bool | None = typer.Option(None, "--judicial/--no-judicial"),
    administrative: bool | None = typer.Option(None, "--administrative/--no-administrative"),
    year: list[str] | None = typer.Option(None, "--year", help="Restrict to sent years."),
) -> None:
    """Print the demand ranking (letters received per provider)."""
    configure_logging()
    cfg = _apply_overrides(
        _load_app_config(config),
        registry=registry,
        limit=limit,
        judicial=judicial,
        administrative=administrative,
        years=year,
    )
    result = run_configured_analysis(
        load_records(records, cfg),
        load_registry(cfg.registry.path),
        cfg,
        pd.Timestamp.now(),
    )
    for item in result.demand:
        typer.echo(f"{item.provider_name}\t{item.count}")


@app.command()
def subjects(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    judicial: bool | None = typer.Option(None, "--judicial/--no-judicial"),
    administrative: bool | None = typer.Option(None, "--administrative/--no-administrative"),
) -> None:
    """Print the subjects enabled by the active filter toggles."""
    cfg = _apply_overrides(
        _load_app_config(config),
        registry=None,
        limit=None,
        judicial=judicial,
        administrative=administrative,
        years=None,
    )
    typer.echo(filter_subtitle(cfg.filters))
    for subject in allowed_subjects(cfg.filters, cfg.subjects):
        typer.echo(subject)
