from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt

ProviderLimit = Union[PositiveInt, Literal["all"]]
TableFormat = Literal["csv", "parquet"]

JUDICIAL_DECISION_SUBJECTS = ["Encaminhamento de decisão judicial"]
ADMINISTRATIVE_SUBJECTS = [
    "Requisição de dados cadastrais",
    "Requisição de dados cadastrais e preservação de dados",
    "Solicitação de dados cadastrais",
]


class FilterConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    judicial_decision: bool = True
    administrative: bool = False


class SubjectCatalog(BaseModel):
    judicial_decision: list[str] = Field(
        default_factory=lambda: list(JUDICIAL_DECISION_SUBJECTS)
    )
    administrative: list[str] = Field(default_factory=lambda: list(ADMINISTRATIVE_SUBJECTS))


class KindsConfig(BaseModel):
    single_recipient: list[str] = Field(default_factory=lambda: ["Ofício"])
    multi_recipient: list[str] = Field(default_factory=lambda: ["Ofício Circular"])


class FieldsConfig(BaseModel):
    kind: str = "tipoDocumento"
    subject: str = "assunto"
    recipient: str = "destinatario"
    sent_date: str = "dataEnvio"
    response_date: str = "dataResposta"
    responded: str = "respondido"
    recipients: str = "destinatariosData"
    recipient_name: str = "nome"


class DatesConfig(BaseModel):
    input_format: str = "%d/%m/%Y"


class RegistryConfig(BaseModel):
    path: str | None = None


class RatesConfig(BaseModel):
    min_total_for_power: int = Field(default=5, ge=1)
    wilson_z: float = Field(default=1.96, gt=0.0)


class OutputsConfig(BaseModel):
    tables_format: TableFormat = "csv"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    filters: FilterConfig = Field(default_factory=FilterConfig)
    subjects: SubjectCatalog = Field(default_factory=SubjectCatalog)
    limit: ProviderLimit = "all"
    kinds: KindsConfig = Field(default_factory=KindsConfig)
    fields: FieldsConfig = Field(default_factory=FieldsConfig)
    dates: DatesConfig = Field(default_factory=DatesConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    years: list[str] = Field(default_factory=list)
    rates: RatesConfig = Field(default_factory=RatesConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def parse_provider_limit(value: str | int) -> ProviderLimit:
    """Parse a limit selector given as text ("5", "all") or int."""
    if isinstance(value, int):
        if value <= 0:
            raise ValueError(f"provider limit must be positive, got {value}")
        return value
    text = str(value).strip().lower()
    if text == "all":
        return "all"
    try:
        parsed = int(text)
    except ValueError as exc:
        raise ValueError(f"provider limit must be a positive integer or 'all', got {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"provider limit must be positive, got {parsed}")
    return parsed


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.registry.path = _resolve_optional_path(
        config.registry.path, base_dir
    ) or os.getenv("PROVIDER_RESPONSE_AUDIT_REGISTRY")
    return config
