"""Parser for a saved calendar listing page."""
import logging
from pathlib import Path
from typing import List, Optional, Union

from bs4 import BeautifulSoup

from processor.models import (
    NO_IMAGE,
    NO_LOCATION,
    NO_NAME,
    NO_TIME,
    NO_URL,
    EventStub,
)
from storage.json_store import JsonFileStore

logger = logging.getLogger(__name__)


class OverviewListParser:
    """Parser for the event cards of a calendar listing export."""

    CARD_SELECTOR = '.content-card.hoverable'
    LINK_SELECTOR = 'a.event-link'
    NAME_SELECTOR = 'h3'
    TIME_SELECTOR = '.event-time'
    LOCATION_SELECTOR = '.attribute .text-ellipses'
    IMAGE_SELECTOR = '.cover-image img'

    def __init__(self, store: JsonFileStore):
        """
        Initialize the overview parser.

        Args:
            store: Store used to write the overview file
        """
        self.store = store

    def parse_file(
        self,
        html_path: Union[str, Path],
        overview_path: Union[str, Path]
    ) -> List[EventStub]:
        """
        Parse a saved listing page and overwrite the overview file.

        Args:
            html_path: Saved calendar listing HTML
            overview_path: Output JSON file for the event stubs

        Returns:
            List of EventStub objects in listing order
        """
        logger.info(f"Parsing event overviews from {html_path}")
        html_content = Path(html_path).read_text(encoding='utf-8')

        stubs = self.parse_html(html_content)
        logger.info(f"Found {len(stubs)} events")

        self.store.write_records(overview_path, [stub.to_dict() for stub in stubs])
        logger.info(f"Events saved to {overview_path}")
        return stubs

    def parse_html(self, html_content: str) -> List[EventStub]:
        """
        Parse event cards from listing HTML.

        Args:
            html_content: Listing page HTML

        Returns:
            List of EventStub objects, indexed from 1 in document order
        """
        soup = BeautifulSoup(html_content, 'html.parser')
        return [
            self._parse_card(card, position)
            for position, card in enumerate(soup.select(self.CARD_SELECTOR), start=1)
        ]

    def _parse_card(self, card, index: int) -> EventStub:
        """
        Parse a single event card. Missing elements become placeholder text.

        Args:
            card: BeautifulSoup element for one card
            index: 1-based position of the card in the listing

        Returns:
            EventStub object
        """
        link = card.select_one(self.LINK_SELECTOR)
        locations = card.select(self.LOCATION_SELECTOR)
        image = card.select_one(self.IMAGE_SELECTOR)

        # Cards list several attributes; the venue is the last one
        location = locations[-1].get_text(strip=True) if locations else ''

        return EventStub(
            name=self._text(card, self.NAME_SELECTOR) or NO_NAME,
            time=self._text(card, self.TIME_SELECTOR) or NO_TIME,
            url=(link.get('href') if link else None) or NO_URL,
            location=location or NO_LOCATION,
            thumbnail_url=self._filename(image.get('src') if image else None) or NO_IMAGE,
            index=index
        )

    @staticmethod
    def _text(card, selector: str) -> str:
        # First match only; cards carry one heading and one time line
        element = card.select_one(selector)
        return element.get_text(strip=True) if element else ''

    @staticmethod
    def _filename(src: Optional[str]) -> str:
        if not src:
            return ''
        return src.split('/')[-1]
