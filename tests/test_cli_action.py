"""
Tests for the action CLI commands.

Commands covered:
- unsubscribe: Execute the unsubscribe cascade for one URL
- history: List recorded outcomes
"""

import pytest
from click.testing import CliRunner
from unittest.mock import patch, MagicMock, Mock

from src.cli.main import cli
from src.email_processor.unsubscribe.types import UnsubscribeOutcome
from src.email_processor.unsubscribe.constants import (
    KIND_LINK, KIND_MAILTO, METHOD_GET, METHOD_MAILTO, FAILURE_HTTP_ERROR
)


@pytest.fixture(autouse=True)
def quiet_cli():
    """Keep the group callback from reading .env files or installing log handlers."""
    with patch('src.cli.main.load_config_from_env_file'), \
         patch('src.cli.main.configure_unsubscribe_logging'):
        yield


class TestUnsubscribeCommand:
    """Test 'unsubscribe' command."""

    def test_unsubscribe_success(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.execute_unsubscribe') as mock_execute:
            mock_execute.return_value = UnsubscribeOutcome.completed(
                METHOD_GET, 'Unsubscribed via GET request to news.example.com', status_code=200
            )

            result = runner.invoke(cli, ['unsubscribe', 'https://news.example.com/unsubscribe?id=42'])

        assert result.exit_code == 0
        assert 'Unsubscribed via GET request' in result.output
        assert 'Method: get' in result.output
        assert 'Status: completed' in result.output

        candidate = mock_execute.call_args[0][0]
        assert candidate.url == 'https://news.example.com/unsubscribe?id=42'
        assert candidate.kind == KIND_LINK

    def test_scheme_less_url_is_normalized(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.execute_unsubscribe') as mock_execute:
            mock_execute.return_value = UnsubscribeOutcome.completed(METHOD_GET, 'ok')

            runner.invoke(cli, ['unsubscribe', 'example.com/optout'])

        assert mock_execute.call_args[0][0].url == 'https://example.com/optout'

    def test_mailto_candidate(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.execute_unsubscribe') as mock_execute:
            mock_execute.return_value = UnsubscribeOutcome.instructions_only(
                METHOD_MAILTO, 'Unsubscribe email prepared for leave@x.com (not sent)'
            )

            result = runner.invoke(cli, ['unsubscribe', 'mailto:leave@x.com?subject=unsubscribe'])

        assert result.exit_code == 0
        assert 'instructions_only' in result.output
        assert mock_execute.call_args[0][0].kind == KIND_MAILTO

    def test_unsubscribe_dry_run(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.execute_unsubscribe') as mock_execute:
            result = runner.invoke(cli, ['unsubscribe', 'https://x.com/u', '--dry-run'])

        assert result.exit_code == 0
        assert '[DRY RUN]' in result.output
        assert 'https://x.com/u' in result.output
        mock_execute.assert_not_called()

    def test_failure_exits_non_zero(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.execute_unsubscribe') as mock_execute:
            mock_execute.return_value = UnsubscribeOutcome.failed(
                METHOD_GET, 'Server responded with HTTP 404', FAILURE_HTTP_ERROR,
                detail='status=404 host=x.com', status_code=404
            )

            result = runner.invoke(cli, ['unsubscribe', 'https://x.com/u'])

        assert result.exit_code != 0
        assert 'HTTP 404' in result.output
        assert 'Detail: status=404 host=x.com' in result.output

    def test_timeout_option_is_passed(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.execute_unsubscribe') as mock_execute:
            mock_execute.return_value = UnsubscribeOutcome.completed(METHOD_GET, 'ok')

            runner.invoke(cli, ['unsubscribe', 'https://x.com/u', '--timeout', '2.5'])

        assert mock_execute.call_args[1]['timeout'] == 2.5

    def test_uses_library_cascade_entry_point(self):
        from src.cli.commands import action
        from src.unsubscribe_executor import execute_unsubscribe as library_execute_unsubscribe

        assert action.execute_unsubscribe is library_execute_unsubscribe

    def test_record_stores_outcome(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.get_cli_session_manager') as mock_manager, \
             patch('src.cli.commands.action.DatabaseOutcomeRecorder') as mock_recorder, \
             patch('src.cli.commands.action.execute_unsubscribe') as mock_execute:

            mock_session = MagicMock()
            mock_manager.return_value.get_session.return_value.__enter__.return_value = mock_session
            outcome = UnsubscribeOutcome.completed(METHOD_GET, 'ok')
            mock_execute.return_value = outcome

            result = runner.invoke(cli, ['unsubscribe', 'https://x.com/u', '--record'])

        assert result.exit_code == 0
        assert 'Outcome recorded' in result.output
        mock_recorder.assert_called_once_with(mock_session)
        recorded_candidate, recorded_outcome = mock_recorder.return_value.record_outcome.call_args[0]
        assert recorded_candidate.url == 'https://x.com/u'
        assert recorded_outcome is outcome


class TestHistoryCommand:
    """Test 'history' command."""

    def test_history_empty(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.get_cli_session_manager') as mock_manager, \
             patch('src.cli.commands.action.DatabaseOutcomeRecorder') as mock_recorder:
            mock_manager.return_value.get_session.return_value.__enter__.return_value = MagicMock()
            mock_recorder.return_value.recent_results.return_value = []

            result = runner.invoke(cli, ['history'])

        assert result.exit_code == 0
        assert 'No unsubscribe results recorded' in result.output

    def test_history_lists_results(self):
        runner = CliRunner()

        with patch('src.cli.commands.action.get_cli_session_manager') as mock_manager, \
             patch('src.cli.commands.action.DatabaseOutcomeRecorder') as mock_recorder:
            mock_manager.return_value.get_session.return_value.__enter__.return_value = MagicMock()
            mock_recorder.return_value.recent_results.return_value = [
                Mock(succeeded=True, method='form', url='https://a.com/u', status='completed',
                     message='Unsubscribed via form submission to a.com'),
                Mock(succeeded=False, method='get', url='https://b.com/u', status='failed',
                     message='Server responded with HTTP 500'),
            ]

            result = runner.invoke(cli, ['history', '--limit', '5'])

        assert result.exit_code == 0
        assert '[form] https://a.com/u' in result.output
        assert 'failed: Server responded with HTTP 500' in result.output
        mock_recorder.return_value.recent_results.assert_called_once_with(5)
