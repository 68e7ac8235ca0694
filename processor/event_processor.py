"""Event processor for merging stubs, page content and summaries."""
import logging
from typing import Any, Dict, List

from processor.models import (
    ContentRecord,
    EventRecord,
    EventStub,
    PageContent,
    SummaryResult,
)

logger = logging.getLogger(__name__)


class EventProcessor:
    """Builds normalized records at each pipeline stage."""

    def load_stubs(self, records: List[Dict[str, Any]]) -> List[EventStub]:
        """
        Convert overview file entries into EventStub objects.

        Args:
            records: Decoded overview file entries

        Returns:
            List of EventStub objects; entries without an index are skipped
        """
        stubs = []
        for record in records:
            try:
                stubs.append(EventStub.from_dict(record))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed overview entry {record!r}: {e}")
        return stubs

    def load_contents(self, records: List[Dict[str, Any]]) -> List[ContentRecord]:
        """
        Convert contents file entries into ContentRecord objects.

        Args:
            records: Decoded contents file entries

        Returns:
            List of ContentRecord objects; entries without an id are skipped
        """
        contents = []
        for record in records:
            try:
                contents.append(ContentRecord.from_dict(record))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed content entry: {e}")
        return contents

    def build_content_record(self, stub: EventStub, page: PageContent) -> ContentRecord:
        """
        Merge a stub with its fetched page.

        Args:
            stub: Event stub from the overview list
            page: Fetched page content and structured data

        Returns:
            ContentRecord keyed by the stub's listing index
        """
        data = page.event_data
        return ContentRecord(
            id=stub.index,
            name=stub.name,
            thumbnail_url=stub.thumbnail_url,
            content=page.content,
            time=stub.time,
            location=stub.location,
            url=stub.url,
            start_date=(data.start_date if data else None) or '',
            end_date=(data.end_date if data else None) or '',
            price=data.price if data else None,
            price_currency=data.price_currency if data else None,
            availability=data.availability if data else None,
            event_status=data.event_status if data else None,
            offer_name=data.offer_name if data else None,
            offers=data.offers if data else None
        )

    def build_event_record(self, content: ContentRecord, summary: SummaryResult) -> EventRecord:
        """
        Merge a content record with its summary into the final event record.

        Args:
            content: ContentRecord for the event
            summary: SummaryResult for the event's page text

        Returns:
            EventRecord without the raw page content
        """
        return EventRecord(
            id=content.id,
            name=content.name,
            thumbnail_url=content.thumbnail_url,
            description=summary.description,
            time=content.time,
            start_date=content.start_date,
            end_date=content.end_date,
            location=content.location,
            tags=list(summary.tags),
            url=content.url,
            price=content.price,
            sponsors=list(summary.sponsors),
            status=summary.status
        )
