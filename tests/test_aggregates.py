from __future__ import annotations

from datetime import date, datetime

from provider_response_audit.features.aggregates import (
    AGGREGATE_COLUMNS,
    aggregate_by_provider,
    build_entry_table,
)
from provider_response_audit.features.expand import ExpandedEntry
from provider_response_audit.io.schema import NOT_SENT, Pending, Responded

NOW = datetime(2024, 1, 10)


def _responded(name: str, sent: date, answered: date) -> ExpandedEntry:
    return ExpandedEntry(name, Responded(sent_date=sent, response_date=answered))


def _pending(name: str, sent: date) -> ExpandedEntry:
    return ExpandedEntry(name, Pending(sent_date=sent))


def test_build_entry_table_measures_response_or_elapsed_time() -> None:
    table = build_entry_table(
        [
            _responded("GOOGLE", date(2024, 1, 1), date(2024, 1, 11)),
            _pending("GOOGLE", date(2024, 1, 1)),
            ExpandedEntry("VIVO", NOT_SENT),
        ],
        now=NOW,
    )

    assert table["duration_days"].iloc[0] == 10.0
    assert table["duration_days"].iloc[1] == 9.0
    assert table["duration_days"].isna().iloc[2]


def test_build_entry_table_discards_negative_durations() -> None:
    table = build_entry_table(
        [
            _responded("GOOGLE", date(2024, 1, 5), date(2024, 1, 1)),
            _pending("VIVO", date(2024, 2, 1)),
        ],
        now=NOW,
    )
    assert table["duration_days"].isna().all()


def test_aggregate_by_provider_accumulates_counters_and_samples() -> None:
    aggregates = aggregate_by_provider(
        [
            _responded("VIVO", date(2024, 1, 1), date(2024, 1, 4)),
            _pending("GOOGLE", date(2024, 1, 1)),
            _responded("GOOGLE", date(2024, 1, 1), date(2024, 1, 3)),
            ExpandedEntry("GOOGLE", NOT_SENT),
            ExpandedEntry("TIM", NOT_SENT),
        ],
        now=NOW,
    )

    assert list(aggregates.columns) == AGGREGATE_COLUMNS
    assert aggregates["provider_name"].tolist() == ["GOOGLE", "VIVO"]
    google = aggregates.iloc[0]
    assert google["total_documents"] == 2
    assert google["responded_documents"] == 1
    assert google["not_responded_documents"] == 1
    assert google["duration_samples"] == (9, 2)
    assert google["responded_samples"] == (2,)
    assert aggregates.iloc[1]["duration_samples"] == (3,)
    assert aggregates.iloc[1]["responded_samples"] == (3,)


def test_aggregate_by_provider_counts_entries_without_valid_samples() -> None:
    aggregates = aggregate_by_provider(
        [_responded("GOOGLE", date(2024, 1, 5), date(2024, 1, 1))],
        now=NOW,
    )
    assert aggregates.iloc[0]["total_documents"] == 1
    assert aggregates.iloc[0]["responded_documents"] == 1
    assert aggregates.iloc[0]["duration_samples"] == ()
    assert aggregates.iloc[0]["responded_samples"] == ()


def test_aggregate_by_provider_handles_empty_input() -> None:
    aggregates = aggregate_by_provider([], now=NOW)
    assert aggregates.empty
    assert list(aggregates.columns) == AGGREGATE_COLUMNS


def test_answered_samples_ignore_pending_elapsed_time() -> None:
    aggregates = aggregate_by_provider(
        [
            _responded("GOOGLE", date(2024, 1, 1), date(2024, 1, 3)),
            _pending("GOOGLE", date(2023, 1, 1)),
            _pending("TIM", date(2024, 1, 1)),
        ],
        now=NOW,
    )

    google, tim = aggregates.iloc[0], aggregates.iloc[1]
    assert google["duration_samples"] == (2, 374)
    assert google["responded_samples"] == (2,)
    assert tim["duration_samples"] == (9,)
    assert tim["responded_samples"] == ()
