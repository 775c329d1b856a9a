from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import pandas as pd
import yaml

from provider_response_audit.config import AppConfig
from provider_response_audit.features.providers import ProviderRegistry
from provider_response_audit.io.schema import (
    CorrespondenceRecord,
    DocumentKind,
    RecipientEntry,
    canonical_payload,
    delivery_from_fields,
    resolve_kind,
)
from provider_response_audit.preprocess.dates import parse_date

LOGGER = logging.getLogger(__name__)

REGISTRY_NAME_CANDIDATES = (
    "nome_fantasia",
    "nomeFantasia",
    "name",
    "provider",
    "provider_name",
)
TRUE_TOKENS = {"true", "1", "yes", "y", "sim", "s"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in TRUE_TOKENS


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _recipient_from_payload(
    payload: Mapping[str, Any],
    config: AppConfig,
) -> RecipientEntry:
    fields = config.fields
    date_format = config.dates.input_format
    return RecipientEntry(
        name=_as_text(payload.get(fields.recipient_name)),
        delivery=delivery_from_fields(
            sent_date=parse_date(payload.get(fields.sent_date), date_format),
            response_date=parse_date(payload.get(fields.response_date), date_format),
            responded=_as_bool(payload.get(fields.responded)),
        ),
    )


def record_from_payload(payload: Mapping[str, Any], config: AppConfig) -> CorrespondenceRecord:
    """Map one raw repository payload to a correspondence record."""
    raw = canonical_payload(payload, config.fields)
    date_format = config.dates.input_format
    kind = resolve_kind(raw["kind"], config.kinds)
    subject = _as_text(raw["subject"])
    sent_date = parse_date(raw["sent_date"], date_format)

    if kind is DocumentKind.SINGLE_RECIPIENT:
        return CorrespondenceRecord.single(
            subject=subject,
            recipient_name=_as_text(raw["recipient"]),
            sent_date=sent_date,
            response_date=parse_date(raw["response_date"], date_format),
            responded=_as_bool(raw["responded"]),
        )
    if kind is DocumentKind.MULTI_RECIPIENT:
        recipients = [
            _recipient_from_payload(item, config)
            for item in (raw["recipients"] or [])
            if isinstance(item, Mapping)
        ]
        return CorrespondenceRecord.multi(
            subject=subject,
            sent_date=sent_date,
            recipients=recipients,
        )
    return CorrespondenceRecord.other(subject=subject, sent_date=sent_date)


def records_from_payloads(
    payloads: list[Mapping[str, Any]],
    config: AppConfig,
) -> list[CorrespondenceRecord]:
    records: list[CorrespondenceRecord] = []
    for index, payload in enumerate(payloads):
        if not isinstance(payload, Mapping):
            LOGGER.debug("Skipping non-object record payload at index %d", index)
            continue
        records.append(record_from_payload(payload, config))
    return records


def load_records(path: Path, config: AppConfig) -> list[CorrespondenceRecord]:
    """Load correspondence records from a JSON or YAML list of payloads."""
    text = path.read_text(encoding="utf-8-sig")
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if isinstance(data, Mapping) and isinstance(data.get("documentos"), list):
        data = data["documentos"]
    if not isinstance(data, list):
        raise ValueError(f"Record file must contain a list of documents: {path}")

    records = records_from_payloads(data, config)
    LOGGER.info("Loaded %d correspondence records from %s", len(records), path)
    return records


def _resolve_name_column(columns: list[str]) -> str | None:
    column_index = {str(column).lower(): column for column in columns}
    for candidate in REGISTRY_NAME_CANDIDATES:
        match = column_index.get(candidate.lower())
        if match is not None:
            return match
    return None


def load_registry(path: str | Path | None) -> ProviderRegistry:
    """Load canonical provider names from a CSV or parquet table."""
    if not path:
        raise ValueError("registry.path must be set to load the provider registry")
    file_path = Path(path)
    if file_path.suffix.lower() == ".parquet":
        table = pd.read_parquet(file_path)
    else:
        table = pd.read_csv(file_path, encoding="utf-8-sig", dtype=str)
    if table.empty:
        return ProviderRegistry.from_names([])

    name_column = _resolve_name_column(list(table.columns)) or table.columns[0]
    names = table[name_column].fillna("").astype(str).str.strip()
    registry = ProviderRegistry.from_names(names[names != ""].tolist())
    LOGGER.info("Loaded %d providers from %s", len(registry), file_path)
    return registry
