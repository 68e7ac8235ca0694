"""Sequential orchestration of the event extraction and enrichment pipeline."""
import logging
import time
from typing import Callable, List, Optional

from pipeline.config import PipelineConfig
from processor.event_processor import EventProcessor
from processor.models import (
    ContentRecord,
    EventRecord,
    EventStub,
    ItemState,
    RunResult,
)
from scraper.overview_list import OverviewListParser
from scraper.page_content import PageContentFetcher
from storage.json_store import JsonFileStore, WorklistError
from summarizer.event_summarizer import EventSummarizer

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """
    Drives stub discovery, page fetching, summarization and persistence.

    Items are processed one at a time in listing order. After each item the
    accumulated records are rewritten in full, and the orchestrator waits
    `pacing_seconds` before starting the next item.
    """

    def __init__(
        self,
        config: PipelineConfig,
        fetcher: Optional[PageContentFetcher] = None,
        summarizer: Optional[EventSummarizer] = None,
        store: Optional[JsonFileStore] = None,
        processor: Optional[EventProcessor] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.config = config
        self.fetcher = fetcher or PageContentFetcher(timeout=config.timeout_seconds)
        self.summarizer = summarizer or EventSummarizer(config)
        self.store = store or JsonFileStore()
        self.processor = processor or EventProcessor()
        self.sleep = sleep

    def discover(self) -> List[EventStub]:
        """
        Parse the saved listing page into the overview file.

        Returns:
            List of EventStub objects
        """
        parser = OverviewListParser(self.store)
        return parser.parse_file(self.config.listing_html, self.config.overview_file)

    def run(self) -> RunResult:
        """
        Fetch, summarize and persist every stub in the overview file.

        Returns:
            RunResult with per-item states
        """
        result = RunResult()
        stubs = self._load_worklist(result, self.config.overview_file, self.processor.load_stubs)
        if stubs is None:
            return result

        contents: List[ContentRecord] = []
        events: List[EventRecord] = []
        result.states = {stub.index: ItemState.PENDING for stub in stubs}

        try:
            self._persist(self.config.contents_file, contents)
            self._persist(self.config.details_file, events)

            for i, stub in enumerate(stubs):
                logger.info(f"Processing event {i + 1} of {len(stubs)}: {stub.name}")

                result.states[stub.index] = ItemState.FETCHING
                content = self._fetch(stub)
                if content is None:
                    result.states[stub.index] = ItemState.SKIPPED
                    result.skipped += 1
                else:
                    contents.append(content)
                    self._persist(self.config.contents_file, contents)

                    result.states[stub.index] = ItemState.SUMMARIZING
                    events.append(self._summarize(content))
                    self._persist(self.config.details_file, events)

                    result.states[stub.index] = ItemState.PERSISTED
                    result.processed += 1

                self._pace(i, len(stubs))
        except OSError as e:
            return self._abort(result, f"cannot write output: {e}")

        logger.info(
            "Pipeline run completed",
            extra={'processed': result.processed, 'skipped': result.skipped}
        )
        return result

    def fetch_contents(self) -> RunResult:
        """
        Fetch every stub in the overview file into the contents file.

        Returns:
            RunResult with per-item states
        """
        result = RunResult()
        stubs = self._load_worklist(result, self.config.overview_file, self.processor.load_stubs)
        if stubs is None:
            return result

        contents: List[ContentRecord] = []
        result.states = {stub.index: ItemState.PENDING for stub in stubs}

        try:
            self._persist(self.config.contents_file, contents)

            for i, stub in enumerate(stubs):
                logger.info(f"Fetching content for event {i + 1} of {len(stubs)}: {stub.name}")

                result.states[stub.index] = ItemState.FETCHING
                content = self._fetch(stub)
                if content is None:
                    result.states[stub.index] = ItemState.SKIPPED
                    result.skipped += 1
                else:
                    contents.append(content)
                    self._persist(self.config.contents_file, contents)
                    result.states[stub.index] = ItemState.PERSISTED
                    result.processed += 1

                self._pace(i, len(stubs))
        except OSError as e:
            return self._abort(result, f"cannot write output: {e}")

        logger.info(f"All event contents saved to {self.config.contents_file}")
        return result

    def summarize_contents(self) -> RunResult:
        """
        Summarize every record in the contents file into the details file.

        Returns:
            RunResult with per-item states
        """
        result = RunResult()
        contents = self._load_worklist(result, self.config.contents_file, self.processor.load_contents)
        if contents is None:
            return result

        events: List[EventRecord] = []
        result.states = {content.id: ItemState.PENDING for content in contents}

        try:
            self._persist(self.config.details_file, events)

            for i, content in enumerate(contents):
                logger.info(f"Summarizing event {i + 1} of {len(contents)}: {content.name}")

                result.states[content.id] = ItemState.SUMMARIZING
                events.append(self._summarize(content))
                self._persist(self.config.details_file, events)
                result.states[content.id] = ItemState.PERSISTED
                result.processed += 1

                self._pace(i, len(contents))
        except OSError as e:
            return self._abort(result, f"cannot write output: {e}")

        logger.info(f"All events summarized and saved to {self.config.details_file}")
        return result

    def _load_worklist(self, result: RunResult, path: str, convert: Callable):
        try:
            return convert(self.store.read_records(path))
        except WorklistError as e:
            self._abort(result, f"cannot read worklist: {e}")
            return None

    def _abort(self, result: RunResult, reason: str) -> RunResult:
        logger.error(f"Aborting run, {reason}", exc_info=True)
        result.aborted = True
        result.error = reason
        return result

    def _fetch(self, stub: EventStub) -> Optional[ContentRecord]:
        page = self.fetcher.fetch(stub.url)
        if page is None:
            logger.warning(f"Skipping event {stub.index} ({stub.name}): page could not be fetched")
            return None
        return self.processor.build_content_record(stub, page)

    def _summarize(self, content: ContentRecord) -> EventRecord:
        logger.info(f"Getting summary for event {content.id}")
        summary = self.summarizer.summarize(content.content)
        return self.processor.build_event_record(content, summary)

    def _persist(self, path: str, records: list) -> None:
        self.store.write_records(path, [record.to_dict() for record in records])

    def _pace(self, position: int, total: int) -> None:
        if position < total - 1 and self.config.pacing_seconds > 0:
            self.sleep(self.config.pacing_seconds)
