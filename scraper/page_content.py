"""Fetcher for individual event detail pages."""
import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from processor.models import PageContent
from scraper.structured_data import extract_event_data

logger = logging.getLogger(__name__)


class PageContentFetcher:
    """Fetches an event page and reduces it to plain text plus structured data."""

    DEFAULT_HEADERS = {
        'User-Agent': 'Mozilla/5.0 (compatible; EventDiscoveryPipeline/1.0)',
        'Accept': 'text/html,application/xhtml+xml;q=0.9,*/*;q=0.8',
    }

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        """
        Initialize the page fetcher.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
            session: Optional requests session to reuse connections
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str) -> Optional[PageContent]:
        """
        Fetch an event page. A single attempt is made.

        Args:
            url: Event detail page URL

        Returns:
            PageContent, or None if the page could not be fetched or parsed
        """
        try:
            response = self.session.get(
                url,
                headers=self.DEFAULT_HEADERS,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch event page {url}: {e}")
            return None

        content_type = response.headers.get('Content-Type', '')
        if content_type and 'html' not in content_type.lower():
            logger.warning(
                f"Skipping event page {url}: unexpected content type '{content_type}'"
            )
            return None

        try:
            return self.parse(response.text)
        except Exception as e:
            logger.warning(f"Failed to parse event page {url}: {e}")
            return None

    def parse(self, html_content: str) -> PageContent:
        """
        Extract structured data and body text from page HTML.

        Args:
            html_content: Raw page HTML

        Returns:
            PageContent with stripped body text
        """
        soup = BeautifulSoup(html_content, 'html.parser')

        # Structured data lives in script tags, so read it before stripping them
        event_data = extract_event_data(soup)

        for element in soup.find_all(['script', 'style']):
            element.decompose()

        body = soup.body or soup
        return PageContent(
            content=body.get_text().strip(),
            event_data=event_data
        )
