"""Command-line entry point for the event discovery pipeline."""
import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from dotenv import load_dotenv

from pipeline.config import PipelineConfig
from pipeline.orchestrator import PipelineOrchestrator
from scraper.page_content import PageContentFetcher

STAGES = ('overviews', 'contents', 'summaries', 'run', 'all')


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='event-pipeline',
        description='Scrape, summarize and export event listings.'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    for stage in STAGES:
        stage_parser = subparsers.add_parser(stage)
        stage_parser.add_argument('--input', dest='listing_html')
        stage_parser.add_argument('--overview-file')
        stage_parser.add_argument('--contents-file')
        stage_parser.add_argument('--details-file')
        stage_parser.add_argument('--pacing', dest='pacing_seconds', type=float)
        stage_parser.add_argument('--model')
        stage_parser.add_argument('--log-level')

    page_parser = subparsers.add_parser('page', help='Print the structured data of one event page')
    page_parser.add_argument('url')
    page_parser.add_argument('--log-level')

    return parser


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Apply command-line overrides on top of the environment configuration."""
    config = PipelineConfig.from_env()
    for name in (
        'listing_html',
        'overview_file',
        'contents_file',
        'details_file',
        'pacing_seconds',
        'model',
        'log_level',
    ):
        value = getattr(args, name, None)
        if value is not None:
            setattr(config, name, value)
    return config


def inspect_page(url: str, config: PipelineConfig) -> int:
    """Print the structured event data found on a single page."""
    page = PageContentFetcher(timeout=config.timeout_seconds).fetch(url)
    if page is None:
        return 1

    event_data = page.event_data.to_dict() if page.event_data else None
    print(json.dumps(event_data, indent=2, ensure_ascii=False))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one pipeline command.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Process exit status, 0 on success and 1 if the run aborted
    """
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        config = build_config(args)
    except ValueError as e:
        setup_logging()
        logging.getLogger(__name__).error(
            f"Invalid configuration: {e}",
            extra={'error_type': type(e).__name__}
        )
        return 1

    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    if args.command == 'page':
        return inspect_page(args.url, config)

    start_time = time.time()
    logger.info(
        f"Pipeline command '{args.command}' started",
        extra={'listing_html': config.listing_html, 'pacing_seconds': config.pacing_seconds}
    )

    orchestrator = PipelineOrchestrator(config)

    if args.command in ('overviews', 'all'):
        try:
            orchestrator.discover()
        except (OSError, ValueError) as e:
            logger.error(
                f"Failed to parse event overviews: {e}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return 1
        if args.command == 'overviews':
            return 0

    if args.command == 'contents':
        result = orchestrator.fetch_contents()
    elif args.command == 'summaries':
        result = orchestrator.summarize_contents()
    else:
        result = orchestrator.run()

    duration = time.time() - start_time
    if result.aborted:
        logger.error(
            f"Pipeline command '{args.command}' aborted: {result.error}",
            extra={'duration_seconds': round(duration, 2)}
        )
        return 1

    logger.info(
        f"Pipeline command '{args.command}' completed: "
        f"{result.processed} processed, {result.skipped} skipped",
        extra={'duration_seconds': round(duration, 2)}
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
