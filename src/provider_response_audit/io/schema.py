from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping, Union

from provider_response_audit.config import FieldsConfig, KindsConfig


class DocumentKind(str, Enum):
    SINGLE_RECIPIENT = "single_recipient"
    MULTI_RECIPIENT = "multi_recipient"
    OTHER = "other"


@dataclass(frozen=True)
class NotSent:
    """Delivery that never left the building; carries no timing data."""

    @property
    def sent_date(self) -> None:
        return None

    @property
    def response_date(self) -> None:
        return None

    @property
    def responded(self) -> bool:
        return False


@dataclass(frozen=True)
class Pending:
    sent_date: date

    @property
    def response_date(self) -> None:
        return None

    @property
    def responded(self) -> bool:
        return False


@dataclass(frozen=True)
class Responded:
    sent_date: date
    response_date: date

    def __post_init__(self) -> None:
        if self.sent_date is None:
            raise ValueError("a responded delivery requires a sent date")
        if self.response_date is None:
            raise ValueError("a responded delivery requires a response date")

    @property
    def responded(self) -> bool:
        return True


Delivery = Union[NotSent, Pending, Responded]
NOT_SENT = NotSent()


def delivery_from_fields(
    sent_date: date | None,
    response_date: date | None,
    responded: bool,
) -> Delivery:
    """Collapse the three loosely related source fields into one delivery state.

    A response only counts when it is both flagged and dated; every other sent
    combination is still pending.
    """
    if sent_date is None:
        return NOT_SENT
    if responded and response_date is not None:
        return Responded(sent_date=sent_date, response_date=response_date)
    return Pending(sent_date=sent_date)


@dataclass(frozen=True)
class RecipientEntry:
    name: str
    delivery: Delivery = NOT_SENT

    @property
    def sent_date(self) -> date | None:
        return self.delivery.sent_date

    @property
    def response_date(self) -> date | None:
        return self.delivery.response_date

    @property
    def responded(self) -> bool:
        return self.delivery.responded


@dataclass(frozen=True)
class CorrespondenceRecord:
    kind: DocumentKind
    subject: str
    sent_date: date | None
    recipient_name: str | None = None
    delivery: Delivery = NOT_SENT
    recipients: tuple[RecipientEntry, ...] = ()

    def __post_init__(self) -> None:
        if self.kind is DocumentKind.SINGLE_RECIPIENT:
            if self.delivery.sent_date != self.sent_date:
                raise ValueError("single-recipient delivery must share the record sent date")
        elif not isinstance(self.delivery, NotSent):
            raise ValueError(f"{self.kind.value} records carry no record-level delivery")
        if self.recipients and self.kind is not DocumentKind.MULTI_RECIPIENT:
            raise ValueError("only multi-recipient records carry a recipient list")

    @classmethod
    def single(
        cls,
        *,
        subject: str,
        recipient_name: str,
        sent_date: date | None,
        response_date: date | None = None,
        responded: bool = False,
    ) -> CorrespondenceRecord:
        return cls(
            kind=DocumentKind.SINGLE_RECIPIENT,
            subject=subject,
            sent_date=sent_date,
            recipient_name=recipient_name,
            delivery=delivery_from_fields(sent_date, response_date, responded),
        )

    @classmethod
    def multi(
        cls,
        *,
        subject: str,
        sent_date: date | None,
        recipients: list[RecipientEntry] | tuple[RecipientEntry, ...],
    ) -> CorrespondenceRecord:
        return cls(
            kind=DocumentKind.MULTI_RECIPIENT,
            subject=subject,
            sent_date=sent_date,
            recipients=tuple(recipients),
        )

    @classmethod
    def other(cls, *, subject: str, sent_date: date | None) -> CorrespondenceRecord:
        return cls(kind=DocumentKind.OTHER, subject=subject, sent_date=sent_date)


def resolve_kind(raw_kind: Any, kinds: KindsConfig) -> DocumentKind:
    label = str(raw_kind or "").strip()
    if label in kinds.single_recipient:
        return DocumentKind.SINGLE_RECIPIENT
    if label in kinds.multi_recipient:
        return DocumentKind.MULTI_RECIPIENT
    return DocumentKind.OTHER


def canonical_payload(payload: Mapping[str, Any], fields: FieldsConfig) -> dict[str, Any]:
    """Rename source payload keys to the canonical names used by the loader."""
    return {
        "kind": payload.get(fields.kind),
        "subject": payload.get(fields.subject),
        "recipient": payload.get(fields.recipient),
        "sent_date": payload.get(fields.sent_date),
        "response_date": payload.get(fields.response_date),
        "responded": payload.get(fields.responded),
        "recipients": payload.get(fields.recipients),
    }
