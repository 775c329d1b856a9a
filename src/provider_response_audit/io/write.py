from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from provider_response_audit.config import OutputsConfig, TableFormat

DEFAULT_TABLE_FORMAT: TableFormat = OutputsConfig().tables_format


def write_table(table: pd.DataFrame, path: Path, fmt: TableFormat = DEFAULT_TABLE_FORMAT) -> Path:
    """Write a metric table; `fmt` follows `outputs.tables_format`."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "csv":
        table.to_csv(path, index=False)
    elif fmt == "parquet":
        table.to_parquet(path, index=False)
    else:
        raise ValueError(f"Unsupported table format: {fmt}")
    return path


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    return path
