"""Language-model summarization of event page text."""
import json
import logging
import re
from typing import Any, Callable, List, Optional

from openai import OpenAI

from pipeline.config import PipelineConfig
from processor.models import SummaryResult

logger = logging.getLogger(__name__)

EVENT_TAGS = [
    'Food',
    'Drinks',
    'Technology',
    'AI',
    'Music',
    'Film',
    'Art',
    'Business',
    'Startup',
    'Education',
    'Gaming',
    'Social Impact',
    'Health',
    'Networking',
    'Keynote',
    'Panel',
    'Party',
    'Exhibition',
    'Conference',
    'Workshop',
    'Web3',
]

STATUS_LABELS = [
    'Available',
    'Waitlist',
    'Approval Required',
    'Sold Out',
    'Registration Closed',
    'Invite Only',
    'Limited Spots',
]

SUMMARY_KEYS = {'description', 'tags', 'sponsors', 'status'}

PROMPT_TEMPLATE = """Analyze this event and output a JSON object with the following structure:

{{
    "description": "Brief summary of the main event details",
    "tags": ["array", "of", "applicable", "tags", "from", "the", "list", "below"],
    "sponsors": ["Array", "of", "official", "event", "sponsors", "only", "(not", "participants", "or", "venues)"],
    "status": "Event status (must be one of: {statuses})"
}}

For sponsors, only include organizations that are explicitly mentioned as sponsors or presenters of the event. Do not include venues, participants, or mentioned companies that aren't sponsoring.

Respond with the JSON object only.

Available tags:
{tags}

Event Content: {content}"""

_OBJECT_RE = re.compile(r'\{.*\}', re.DOTALL)


def build_prompt(content: str) -> str:
    """Build the summarization prompt for one event page."""
    return PROMPT_TEMPLATE.format(
        statuses=', '.join(STATUS_LABELS),
        tags='\n'.join(f"- {tag}" for tag in EVENT_TAGS),
        content=content
    )


def validate_summary(data: Any) -> Optional[SummaryResult]:
    """
    Accept a decoded reply only if it matches the summary shape exactly.

    Args:
        data: Decoded JSON value

    Returns:
        SummaryResult, or None if the value has the wrong shape
    """
    if not isinstance(data, dict) or set(data) != SUMMARY_KEYS:
        return None

    description = data['description']
    tags = data['tags']
    sponsors = data['sponsors']
    status = data['status']

    if not isinstance(description, str) or not isinstance(status, str):
        return None
    if not _is_string_list(tags) or not _is_string_list(sponsors):
        return None
    if any(tag not in EVENT_TAGS for tag in tags):
        return None
    if status and status not in STATUS_LABELS:
        return None

    return SummaryResult(
        description=description,
        tags=list(dict.fromkeys(tags)),
        sponsors=list(sponsors),
        status=status
    )


def parse_direct(text: str) -> Any:
    """Decode the whole reply as JSON."""
    return json.loads(text)


def parse_embedded(text: str) -> Any:
    """Decode the outermost {...} span of a reply wrapped in prose or fences."""
    match = _OBJECT_RE.search(text)
    if not match:
        raise ValueError('no JSON object in reply')
    return json.loads(match.group(0))


PARSE_STRATEGIES: List[Callable[[str], Any]] = [parse_direct, parse_embedded]


def parse_summary(text: Optional[str]) -> SummaryResult:
    """
    Turn a model reply into a SummaryResult.

    Each parse strategy is tried in order; the first candidate that validates
    wins. Anything else yields the empty summary.

    Args:
        text: Raw message content from the model

    Returns:
        SummaryResult (empty if nothing validates)
    """
    if not text or not text.strip():
        logger.warning("Empty summary reply")
        return SummaryResult()

    for strategy in PARSE_STRATEGIES:
        try:
            candidate = strategy(text)
        except ValueError as e:
            logger.debug(f"Summary strategy {strategy.__name__} failed: {e}")
            continue

        summary = validate_summary(candidate)
        if summary is not None:
            return summary
        logger.debug(f"Summary strategy {strategy.__name__} produced an invalid shape")

    logger.warning("Summary reply did not match the expected shape, using defaults")
    return SummaryResult()


class EventSummarizer:
    """Client for the chat-completion summarization call."""

    def __init__(self, config: PipelineConfig, client: Optional[Any] = None):
        """
        Initialize the summarizer.

        Args:
            config: Pipeline configuration (model, token limit, API key)
            client: Optional OpenAI-compatible client, created from config if omitted
        """
        self.model = config.model
        self.max_tokens = config.max_tokens
        self._client = client
        self._api_key = config.openai_api_key

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def summarize(self, content: str) -> SummaryResult:
        """
        Summarize one event page.

        Args:
            content: Plain-text page content

        Returns:
            SummaryResult, empty on any request or parse failure
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{'role': 'user', 'content': build_prompt(content)}],
                max_tokens=self.max_tokens
            )
            reply = response.choices[0].message.content
        except Exception as e:
            logger.error(f"Error getting summary from OpenAI: {e}", exc_info=True)
            return SummaryResult()

        return parse_summary(reply)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)
