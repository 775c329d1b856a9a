from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from provider_response_audit.features.providers import ProviderRegistry
from provider_response_audit.io.schema import CorrespondenceRecord, Delivery, DocumentKind

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpandedEntry:
    provider_name: str
    delivery: Delivery

    @property
    def sent_date(self) -> date | None:
        return self.delivery.sent_date

    @property
    def response_date(self) -> date | None:
        return self.delivery.response_date

    @property
    def responded(self) -> bool:
        return self.delivery.responded


def _candidates(record: CorrespondenceRecord) -> list[tuple[str | None, Delivery]]:
    if record.kind is DocumentKind.SINGLE_RECIPIENT:
        return [(record.recipient_name, record.delivery)]
    if record.kind is DocumentKind.MULTI_RECIPIENT:
        # Each recipient of a circular letter is tracked on its own dates.
        return [(recipient.name, recipient.delivery) for recipient in record.recipients]
    return []


def expand_recipients(
    records: Iterable[CorrespondenceRecord],
    registry: ProviderRegistry,
) -> list[ExpandedEntry]:
    """Fan records out to one entry per recipient recognized as a provider."""
    entries: list[ExpandedEntry] = []
    unmatched = 0
    for record in records:
        for candidate, delivery in _candidates(record):
            provider_name = registry.resolve(candidate)
            if provider_name is None:
                unmatched += 1
                continue
            entries.append(ExpandedEntry(provider_name=provider_name, delivery=delivery))
    if unmatched:
        LOGGER.debug("Dropped %d recipients not found in the provider registry", unmatched)
    return entries
