from __future__ import annotations

from datetime import date

import pytest

from provider_response_audit.io.schema import (
    NOT_SENT,
    CorrespondenceRecord,
    DocumentKind,
    Pending,
    RecipientEntry,
    Responded,
    delivery_from_fields,
)


def test_delivery_from_fields_collapses_source_flags() -> None:
    sent = date(2024, 1, 1)
    answered = date(2024, 1, 11)

    assert delivery_from_fields(None, None, False) is NOT_SENT
    assert delivery_from_fields(None, answered, True) is NOT_SENT
    assert delivery_from_fields(sent, None, False) == Pending(sent_date=sent)
    assert delivery_from_fields(sent, None, True) == Pending(sent_date=sent)
    assert delivery_from_fields(sent, answered, False) == Pending(sent_date=sent)
    assert delivery_from_fields(sent, answered, True) == Responded(
        sent_date=sent, response_date=answered
    )


def test_responded_requires_both_dates() -> None:
    with pytest.raises(ValueError, match="sent date"):
        Responded(sent_date=None, response_date=date(2024, 1, 2))  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="response date"):
        Responded(sent_date=date(2024, 1, 1), response_date=None)  # type: ignore[arg-type]


def test_recipient_entry_exposes_delivery_fields() -> None:
    entry = RecipientEntry(
        name="GOOGLE",
        delivery=Responded(sent_date=date(2024, 1, 1), response_date=date(2024, 1, 3)),
    )
    assert entry.sent_date == date(2024, 1, 1)
    assert entry.response_date == date(2024, 1, 3)
    assert entry.responded is True
    assert RecipientEntry(name="VIVO").sent_date is None


def test_record_constructors_assign_kinds() -> None:
    single = CorrespondenceRecord.single(
        subject="Encaminhamento de decisão judicial",
        recipient_name="GOOGLE",
        sent_date=date(2024, 1, 1),
    )
    multi = CorrespondenceRecord.multi(subject="x", sent_date=None, recipients=[])
    other = CorrespondenceRecord.other(subject="x", sent_date=date(2024, 1, 1))

    assert single.kind is DocumentKind.SINGLE_RECIPIENT
    assert single.delivery == Pending(sent_date=date(2024, 1, 1))
    assert multi.kind is DocumentKind.MULTI_RECIPIENT
    assert multi.recipients == ()
    assert other.kind is DocumentKind.OTHER


def test_record_rejects_inconsistent_delivery() -> None:
    with pytest.raises(ValueError, match="share the record sent date"):
        CorrespondenceRecord(
            kind=DocumentKind.SINGLE_RECIPIENT,
            subject="x",
            sent_date=date(2024, 1, 1),
            recipient_name="GOOGLE",
            delivery=Pending(sent_date=date(2024, 2, 1)),
        )
    with pytest.raises(ValueError, match="recipient list"):
        CorrespondenceRecord(
            kind=DocumentKind.OTHER,
            subject="x",
            sent_date=None,
            recipients=(RecipientEntry(name="GOOGLE"),),
        )
