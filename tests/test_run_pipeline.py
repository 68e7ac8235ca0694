"""Integration tests for the command-line entry point."""
import json
import logging
import os
from unittest.mock import Mock, patch

import pytest

from pipeline.config import PipelineConfig
from processor.models import PageContent, RunResult, StructuredEventData
from run_pipeline import JsonFormatter, build_config, build_parser, main, setup_logging


@pytest.fixture
def mock_env(tmp_path):
    """Set up environment variables for testing."""
    env_vars = {
        'OPENAI_API_KEY': 'test-key',
        'LOG_LEVEL': 'INFO',
        'PACING_SECONDS': '0.5',
        'TIMEOUT_SECONDS': '10',
        'DETAILS_FILE': str(tmp_path / 'event_details.json')
    }
    with patch.dict(os.environ, env_vars), patch('run_pipeline.load_dotenv'):
        yield env_vars


class TestMain:
    """Test cases for main."""

    @patch('run_pipeline.PipelineOrchestrator')
    def test_run_command_success(self, mock_orchestrator_class, mock_env):
        """Test a successful combined run."""
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = RunResult(processed=2, skipped=1)
        mock_orchestrator_class.return_value = mock_orchestrator

        assert main(['run']) == 0

        config = mock_orchestrator_class.call_args.args[0]
        assert config.pacing_seconds == 0.5
        assert config.timeout_seconds == 10
        assert config.openai_api_key == 'test-key'
        assert config.details_file == mock_env['DETAILS_FILE']
        mock_orchestrator.run.assert_called_once_with()
        assert not mock_orchestrator.discover.called

    @patch('run_pipeline.PipelineOrchestrator')
    def test_all_command_discovers_then_runs(self, mock_orchestrator_class, mock_env):
        mock_orchestrator = Mock()
        mock_orchestrator.discover.return_value = []
        mock_orchestrator.run.return_value = RunResult()
        mock_orchestrator_class.return_value = mock_orchestrator

        assert main(['all', '--input', 'calendar.html']) == 0

        config = mock_orchestrator_class.call_args.args[0]
        assert config.listing_html == 'calendar.html'
        mock_orchestrator.discover.assert_called_once_with()
        mock_orchestrator.run.assert_called_once_with()

    @patch('run_pipeline.PipelineOrchestrator')
    def test_overviews_failure(self, mock_orchestrator_class, mock_env):
        """Test that a missing listing file exits with an error status."""
        mock_orchestrator = Mock()
        mock_orchestrator.discover.side_effect = FileNotFoundError('calendar.html')
        mock_orchestrator_class.return_value = mock_orchestrator

        assert main(['overviews']) == 1
        assert not mock_orchestrator.run.called

    @patch('run_pipeline.PipelineOrchestrator')
    def test_stage_commands(self, mock_orchestrator_class, mock_env):
        mock_orchestrator = Mock()
        mock_orchestrator.fetch_contents.return_value = RunResult(processed=1)
        mock_orchestrator.summarize_contents.return_value = RunResult(processed=1)
        mock_orchestrator_class.return_value = mock_orchestrator

        assert main(['contents']) == 0
        assert main(['summaries', '--pacing', '0', '--model', 'gpt-4o-mini']) == 0

        mock_orchestrator.fetch_contents.assert_called_once_with()
        mock_orchestrator.summarize_contents.assert_called_once_with()
        config = mock_orchestrator_class.call_args.args[0]
        assert config.pacing_seconds == 0
        assert config.model == 'gpt-4o-mini'

    @patch('run_pipeline.PipelineOrchestrator')
    def test_invalid_numeric_setting(self, mock_orchestrator_class, mock_env):
        """Test that a malformed numeric variable exits with an error status."""
        with patch.dict(os.environ, {'PACING_SECONDS': 'fast'}):
            assert main(['run']) == 1

        assert not mock_orchestrator_class.called

    @patch('run_pipeline.PipelineOrchestrator')
    def test_aborted_run(self, mock_orchestrator_class, mock_env):
        """Test that an aborted run exits with an error status."""
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = RunResult(aborted=True, error='cannot read worklist')
        mock_orchestrator_class.return_value = mock_orchestrator

        assert main(['run']) == 1

    @patch('run_pipeline.PipelineOrchestrator')
    @patch('run_pipeline.setup_logging')
    def test_logging_output(self, mock_setup_logging, mock_orchestrator_class, mock_env, caplog):
        """Test that logging output is generated correctly."""
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = RunResult(processed=3)
        mock_orchestrator_class.return_value = mock_orchestrator

        with caplog.at_level(logging.INFO, logger='run_pipeline'):
            main(['run'])

        log_messages = [record.message for record in caplog.records]
        assert any("Pipeline command 'run' started" in msg for msg in log_messages)
        assert any('3 processed, 0 skipped' in msg for msg in log_messages)

    @patch('run_pipeline.PageContentFetcher')
    def test_page_command(self, mock_fetcher_class, mock_env, capsys):
        """Test printing the structured data of a single page."""
        mock_fetcher_class.return_value.fetch.return_value = PageContent(
            content='Text',
            event_data=StructuredEventData(price='Free', event_status='EventScheduled')
        )

        assert main(['page', 'https://lu.ma/hdue6sat']) == 0

        printed = json.loads(capsys.readouterr().out)
        assert printed['price'] == 'Free'
        assert printed['eventStatus'] == 'EventScheduled'
        mock_fetcher_class.return_value.fetch.assert_called_once_with('https://lu.ma/hdue6sat')

    @patch('run_pipeline.PageContentFetcher')
    def test_page_command_fetch_failure(self, mock_fetcher_class, mock_env):
        mock_fetcher_class.return_value.fetch.return_value = None

        assert main(['page', 'https://lu.ma/missing']) == 1


class TestBuildConfig:
    """Test cases for configuration overrides."""

    def test_defaults_from_empty_environment(self):
        config = PipelineConfig.from_env({})

        assert config == PipelineConfig()
        assert config.model == 'gpt-3.5-turbo'
        assert config.max_tokens == 4096
        assert config.pacing_seconds == 1.0

    def test_flags_override_environment(self, mock_env):
        args = build_parser().parse_args(['run', '--details-file', 'out.json', '--log-level', 'DEBUG'])

        config = build_config(args)

        assert config.details_file == 'out.json'
        assert config.log_level == 'DEBUG'
        assert config.pacing_seconds == 0.5


class TestSetupLogging:
    """Test cases for logging setup."""

    def test_setup_logging_default_level(self):
        """Test logging setup with default INFO level."""
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_debug_level(self):
        """Test logging setup with DEBUG level."""
        setup_logging('DEBUG')
        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_unknown_level_falls_back_to_info(self):
        setup_logging('VERBOSE')
        assert logging.getLogger().level == logging.INFO

    def test_json_formatter(self):
        """Test that log records are rendered as JSON objects."""
        record = logging.LogRecord(
            'pipeline.orchestrator', logging.WARNING, __file__, 1,
            'Skipping event %s', (2,), None
        )

        data = json.loads(JsonFormatter().format(record))

        assert data['level'] == 'WARNING'
        assert data['message'] == 'Skipping event 2'
        assert data['logger'] == 'pipeline.orchestrator'
        assert 'exception' not in data
