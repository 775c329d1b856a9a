from __future__ import annotations

import logging
from collections.abc import Collection, Iterable

from provider_response_audit.io.schema import CorrespondenceRecord, DocumentKind

LOGGER = logging.getLogger(__name__)

RESPONSE_BEARING_KINDS = frozenset(
    {DocumentKind.SINGLE_RECIPIENT, DocumentKind.MULTI_RECIPIENT}
)


def is_eligible(
    record: CorrespondenceRecord,
    allowed: Collection[str],
    years: Collection[str] = (),
) -> bool:
    if record.kind not in RESPONSE_BEARING_KINDS:
        return False
    if record.subject not in allowed:
        return False
    if record.sent_date is None:
        return False
    if years and str(record.sent_date.year) not in years:
        return False
    return True


def classify_records(
    records: Iterable[CorrespondenceRecord],
    allowed: Collection[str],
    *,
    years: Collection[str] = (),
) -> list[CorrespondenceRecord]:
    """Keep sent, in-scope letters whose subject is allowed; order is preserved."""
    allowed_set = frozenset(allowed)
    if not allowed_set:
        return []
    year_set = frozenset(str(year) for year in years)
    eligible: list[CorrespondenceRecord] = []
    skipped = 0
    for record in records:
        if is_eligible(record, allowed_set, year_set):
            eligible.append(record)
        else:
            skipped += 1
    LOGGER.debug("Classified %d eligible records, skipped %d", len(eligible), skipped)
    return eligible
