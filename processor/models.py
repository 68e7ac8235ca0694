"""Data models for event extraction and enrichment."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


NO_NAME = 'No name found'
NO_TIME = 'No time found'
NO_URL = 'No URL found'
NO_LOCATION = 'No location found'
NO_IMAGE = 'No image found'


def _without_none(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None so absent fields are omitted from JSON."""
    return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class EventStub:
    """Event card parsed from the calendar listing page."""
    name: str
    time: str
    url: str
    location: str
    thumbnail_url: str
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'time': self.time,
            'url': self.url,
            'location': self.location,
            'thumbnailUrl': self.thumbnail_url,
            'index': self.index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EventStub':
        return cls(
            name=data.get('name') or NO_NAME,
            time=data.get('time') or NO_TIME,
            url=data.get('url') or NO_URL,
            location=data.get('location') or NO_LOCATION,
            thumbnail_url=data.get('thumbnailUrl') or NO_IMAGE,
            index=int(data['index'])
        )


@dataclass
class StructuredEventData:
    """Fields taken from a page's JSON-LD Event block."""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    price: Optional[str] = None
    price_currency: Optional[str] = None
    availability: str = ''
    event_status: str = ''
    offer_name: Optional[str] = None
    offers: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            'startDate': self.start_date,
            'endDate': self.end_date,
            'price': self.price,
            'priceCurrency': self.price_currency,
            'availability': self.availability,
            'eventStatus': self.event_status,
            'offerName': self.offer_name,
            'offers': self.offers,
        })


@dataclass
class PageContent:
    """Plain-text body of an event page plus its structured data."""
    content: str
    event_data: Optional[StructuredEventData]


@dataclass
class ContentRecord:
    """Fetched event page merged with its stub."""
    id: int
    name: str
    thumbnail_url: str
    content: str
    time: str
    location: str
    url: str
    start_date: str = ''
    end_date: str = ''
    price: Optional[str] = None
    price_currency: Optional[str] = None
    availability: Optional[str] = None
    event_status: Optional[str] = None
    offer_name: Optional[str] = None
    offers: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            'id': self.id,
            'name': self.name,
            'thumbnailUrl': self.thumbnail_url,
            'content': self.content,
            'time': self.time,
            'startDate': self.start_date,
            'endDate': self.end_date,
            'location': self.location,
            'url': self.url,
            'price': self.price,
            'priceCurrency': self.price_currency,
            'availability': self.availability,
            'eventStatus': self.event_status,
            'offerName': self.offer_name,
            'offers': self.offers,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContentRecord':
        return cls(
            id=int(data['id']),
            name=data.get('name', NO_NAME),
            thumbnail_url=data.get('thumbnailUrl', NO_IMAGE),
            content=data.get('content', ''),
            time=data.get('time', NO_TIME),
            location=data.get('location', NO_LOCATION),
            url=data.get('url', NO_URL),
            start_date=data.get('startDate', ''),
            end_date=data.get('endDate', ''),
            price=data.get('price'),
            price_currency=data.get('priceCurrency'),
            availability=data.get('availability'),
            event_status=data.get('eventStatus'),
            offer_name=data.get('offerName'),
            offers=data.get('offers')
        )


@dataclass
class SummaryResult:
    """Language-model summary of one event page."""
    description: str = ''
    tags: List[str] = field(default_factory=list)
    sponsors: List[str] = field(default_factory=list)
    status: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'tags': list(self.tags),
            'sponsors': list(self.sponsors),
            'status': self.status,
        }


@dataclass
class EventRecord:
    """Final event record consumed by the web front-end."""
    id: int
    name: str
    thumbnail_url: str
    description: str
    time: str
    start_date: str
    end_date: str
    location: str
    tags: List[str]
    url: str
    price: Optional[str]
    sponsors: List[str]
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            'id': self.id,
            'name': self.name,
            'thumbnailUrl': self.thumbnail_url,
            'description': self.description,
            'time': self.time,
            'startDate': self.start_date,
            'endDate': self.end_date,
            'location': self.location,
            'tags': list(self.tags),
            'url': self.url,
            'price': self.price,
            'sponsors': list(self.sponsors),
            'status': self.status,
        })


class ItemState(str, Enum):
    """Per-item progress through a pipeline run."""
    PENDING = 'pending'
    FETCHING = 'fetching'
    SUMMARIZING = 'summarizing'
    PERSISTED = 'persisted'
    SKIPPED = 'skipped'


@dataclass
class RunResult:
    """Result of one orchestrator run."""
    processed: int = 0
    skipped: int = 0
    aborted: bool = False
    error: Optional[str] = None
    states: Dict[int, ItemState] = field(default_factory=dict)
