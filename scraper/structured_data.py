"""Extraction of schema.org Event metadata embedded in event pages."""
import json
import logging
from typing import Any, Iterator, Optional

from bs4 import BeautifulSoup

from processor.models import StructuredEventData

logger = logging.getLogger(__name__)

JSON_LD_TYPE = 'application/ld+json'
EVENT_TYPE = 'Event'


def extract_event_data(soup: BeautifulSoup) -> Optional[StructuredEventData]:
    """
    Extract structured event data from the first JSON-LD Event block.

    Args:
        soup: Parsed event page

    Returns:
        StructuredEventData, or None if the page has no Event block
    """
    for index, script in enumerate(soup.find_all('script', type=JSON_LD_TYPE)):
        raw = script.string or script.get_text()
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed JSON-LD block {index}: {e}")
            continue

        for item in _iter_items(payload):
            if item.get('@type') == EVENT_TYPE:
                return _to_structured_data(item)

    return None


def format_price(price: Any) -> Optional[str]:
    """
    Format an offer price for display.

    Args:
        price: Raw price value from the offer (number, numeric string or None)

    Returns:
        "Free" for zero, "$<value>" otherwise, None when the price is absent
    """
    if price is None or isinstance(price, bool):
        return None

    if isinstance(price, str):
        text = price.strip()
        if not text:
            return None
        try:
            if float(text) == 0:
                return 'Free'
        except ValueError:
            pass
        return f"${text}"

    if price == 0:
        return 'Free'
    if isinstance(price, float) and price.is_integer():
        price = int(price)
    return f"${price}"


def enum_suffix(value: Any) -> str:
    """Return the last path segment of a schema.org enumeration URL."""
    if not isinstance(value, str) or not value:
        return ''
    return value.rstrip('/').split('/')[-1]


def _iter_items(payload: Any) -> Iterator[dict]:
    if isinstance(payload, dict):
        yield payload
    elif isinstance(payload, list):
        for item in payload:
            if isinstance(item, dict):
                yield item


def _first_offer(offers: Any) -> dict:
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    return offers if isinstance(offers, dict) else {}


def _to_structured_data(item: dict) -> StructuredEventData:
    offers = item.get('offers')
    offer = _first_offer(offers)

    return StructuredEventData(
        start_date=item.get('startDate'),
        end_date=item.get('endDate'),
        price=format_price(offer.get('price')),
        price_currency=offer.get('priceCurrency'),
        availability=enum_suffix(offer.get('availability')),
        event_status=enum_suffix(item.get('eventStatus')),
        offer_name=offer.get('name'),
        offers=offers
    )
