from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime

import pandas as pd

from provider_response_audit.features.expand import ExpandedEntry
from provider_response_audit.preprocess.dates import elapsed_days, to_reference_timestamp

LOGGER = logging.getLogger(__name__)

ENTRY_COLUMNS = ["provider_name", "sent_date", "response_date", "responded", "duration_days"]
AGGREGATE_COLUMNS = [
    "provider_name",
    "total_documents",
    "responded_documents",
    "not_responded_documents",
    "duration_samples",
    "responded_samples",
]

SampleFilter = Callable[[pd.DataFrame], pd.Series]


def sent_entries(table: pd.DataFrame) -> pd.Series:
    return table["sent_date"].notna()


def answered_entries(table: pd.DataFrame) -> pd.Series:
    answered = table["responded"].astype(bool) & table["response_date"].notna()
    return table["sent_date"].notna() & answered


# Sample column -> entries allowed to contribute to it.
SAMPLE_FILTERS: dict[str, SampleFilter] = {
    "duration_samples": sent_entries,
    "responded_samples": answered_entries,
}


def build_entry_table(
    entries: Sequence[ExpandedEntry],
    now: date | datetime | pd.Timestamp,
) -> pd.DataFrame:
    """One row per expanded entry with its duration sample in whole days.

    Answered entries measure sent -> response; everything else measures
    sent -> now, so ignored letters keep contributing elapsed time.
    """
    if not entries:
        return pd.DataFrame(columns=ENTRY_COLUMNS)

    table = pd.DataFrame(
        {
            "provider_name": [entry.provider_name for entry in entries],
            "sent_date": pd.to_datetime([entry.sent_date for entry in entries]),
            "response_date": pd.to_datetime([entry.response_date for entry in entries]),
            "responded": [entry.responded for entry in entries],
        }
    )
    reference = to_reference_timestamp(now)
    end = table["response_date"].where(table["responded"], reference)
    durations = elapsed_days(table["sent_date"], end)

    negative = durations < 0
    if negative.any():
        LOGGER.debug("Discarding %d negative duration samples", int(negative.sum()))
    table["duration_days"] = durations.where(~negative)
    return table


def _empty_aggregates() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "provider_name": pd.Series(dtype=str),
            "total_documents": pd.Series(dtype=int),
            "responded_documents": pd.Series(dtype=int),
            "not_responded_documents": pd.Series(dtype=int),
            "duration_samples": pd.Series(dtype=object),
            "responded_samples": pd.Series(dtype=object),
        }
    )


def aggregate_by_provider(
    entries: Sequence[ExpandedEntry],
    now: date | datetime | pd.Timestamp,
) -> pd.DataFrame:
    """Group sent entries by provider into counters and duration samples.

    `duration_samples` covers every sent entry (pending ones measured up to
    `now`); `responded_samples` keeps only answered entries.
    """
    table = build_entry_table(entries, now)
    sent = table[table["sent_date"].notna()] if not table.empty else table
    if sent.empty:
        return _empty_aggregates()

    grouped = (
        sent.groupby("provider_name", sort=True)
        .agg(
            total_documents=("sent_date", "count"),
            responded_documents=("responded", "sum"),
        )
        .reset_index()
    )
    grouped["total_documents"] = grouped["total_documents"].astype(int)
    grouped["responded_documents"] = grouped["responded_documents"].astype(int)
    grouped["not_responded_documents"] = (
        grouped["total_documents"] - grouped["responded_documents"]
    )

    for column, eligible in SAMPLE_FILTERS.items():
        grouped[column] = _samples_by_provider(sent[eligible(sent)], grouped["provider_name"])
    return grouped[AGGREGATE_COLUMNS]


def _samples_by_provider(table: pd.DataFrame, providers: pd.Series) -> pd.Series:
    samples = {
        str(provider): tuple(int(value) for value in durations.dropna())
        for provider, durations in table.groupby("provider_name", sort=True)["duration_days"]
    }
    return pd.Series(
        [samples.get(str(provider), ()) for provider in providers],
        index=providers.index,
        dtype=object,
    )
