from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from provider_response_audit.io.write import DEFAULT_TABLE_FORMAT, write_summary, write_table


def test_write_table_defaults_to_configured_format(tmp_path: Path) -> None:
    table = pd.DataFrame({"provider_name": ["GOOGLE"], "count": [2]})

    path = write_table(table, tmp_path / "tables" / "demand.csv")

    assert DEFAULT_TABLE_FORMAT == "csv"
    assert pd.read_csv(path).to_dict("records") == [{"provider_name": "GOOGLE", "count": 2}]


def test_write_table_rejects_unknown_format(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unsupported table format"):
        write_table(pd.DataFrame(), tmp_path / "demand.xlsx", fmt="xlsx")  # type: ignore[arg-type]


def test_write_summary_keeps_accents_and_sorts_keys(tmp_path: Path) -> None:
    path = write_summary({"subtitle": "Decisão judicial", "alpha": 1}, tmp_path / "s.json")

    text = path.read_text(encoding="utf-8")
    assert "Decisão judicial" in text
    assert list(json.loads(text)) == ["alpha", "subtitle"]
