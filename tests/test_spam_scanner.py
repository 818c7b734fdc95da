"""
Tests for scan and unsubscribe orchestration.

The mail provider, classifier and execution engine are replaced by
fakes; the database is in-memory SQLite.
"""

from unittest.mock import Mock, patch

import pytest

from src.database.models import SpamEmail, UnsubscribeResult
from src.email_processor.interfaces import Message, MessageBody, Sender, SpamVerdict
from src.email_processor.spam_scanner import SpamScanner
from src.email_processor.unsubscribe.types import UnsubscribeOutcome
from src.email_processor.unsubscribe.constants import (
    METHOD_GET, METHOD_FORM, FAILURE_NO_FORM_FOUND
)


def make_message(message_id, sender, subject, content):
    return Message(
        id=message_id,
        subject=subject,
        sender=Sender(address=sender),
        body=MessageBody(content=content)
    )


MESSAGES = [
    make_message('m1', 'promo@shop.example', 'Huge sale',
                 '<p>Buy now</p><a href="https://shop.example/unsubscribe?id=1">Unsubscribe</a>'),
    make_message('m2', 'friend@example.org', 'Lunch?', '<p>See you at noon</p>'),
    make_message('m3', 'deals@spam.example', 'You won', '<p>Claim your prize</p>'),
]


class FakeClassifier:
    """Everything not from friend@ is spam."""

    def __init__(self):
        self.calls = []

    def classify(self, sender, subject, plain_text_body):
        self.calls.append((sender, subject, plain_text_body))
        if sender.startswith('friend@'):
            return SpamVerdict(is_spam=False, confidence=5)
        return SpamVerdict(is_spam=True, confidence=90, reasoning='promotional')


@pytest.fixture
def fetcher():
    fetcher = Mock()
    fetcher.get_spam_messages.return_value = MESSAGES
    return fetcher


@pytest.fixture
def executor():
    executor = Mock()
    executor.execute.return_value = UnsubscribeOutcome.completed(METHOD_GET, 'Unsubscribed via GET request to shop.example')
    return executor


@pytest.fixture
def scanner(db_session, fetcher, executor):
    return SpamScanner(db_session, fetcher, FakeClassifier(), executor=executor)


class TestScan:

    def test_scan_counts(self, scanner, db_session):
        scan = scanner.scan(credentials='token', provider='microsoft')

        assert scan.status == 'completed'
        assert scan.total_scanned == 3
        assert scan.detected_spam == 2
        assert scan.unsubscribe_links == 1
        assert scan.completed_at is not None
        assert db_session.query(SpamEmail).count() == 2

    def test_spam_email_stores_first_candidate(self, scanner, db_session):
        scanner.scan(credentials='token', provider='google')

        promo = db_session.query(SpamEmail).filter_by(message_id='m1').one()
        assert promo.has_unsubscribe_link is True
        assert promo.unsubscribe_url == 'https://shop.example/unsubscribe?id=1'
        assert promo.ai_confidence == 90

        prize = db_session.query(SpamEmail).filter_by(message_id='m3').one()
        assert prize.has_unsubscribe_link is False
        assert prize.unsubscribe_url is None

    def test_classifier_receives_plain_text(self, db_session, fetcher):
        classifier = FakeClassifier()
        SpamScanner(db_session, fetcher, classifier, executor=Mock()).scan('token', 'yahoo')

        assert classifier.calls[0] == ('promo@shop.example', 'Huge sale', 'Buy now Unsubscribe')

    def test_fetch_failure_marks_scan_failed(self, db_session, executor):
        fetcher = Mock()
        fetcher.get_spam_messages.side_effect = RuntimeError('token expired')

        scan = SpamScanner(db_session, fetcher, FakeClassifier(), executor=executor).scan('token', 'microsoft')

        assert scan.status == 'failed'
        assert scan.error_message == 'token expired'
        assert db_session.query(SpamEmail).count() == 0

    def test_classifier_error_skips_message(self, db_session, fetcher, executor):
        classifier = Mock()
        classifier.classify.side_effect = [
            RuntimeError('rate limited'),
            SpamVerdict(is_spam=False),
            SpamVerdict(is_spam=True, confidence=70),
        ]

        scan = SpamScanner(db_session, fetcher, classifier, executor=executor).scan('token', 'microsoft')

        assert scan.status == 'completed'
        assert scan.detected_spam == 1


class TestProcessUnsubscribes:

    def test_processes_selected_emails(self, scanner, db_session, executor):
        scan = scanner.scan('token', 'microsoft')

        run = scanner.process_unsubscribes(scan.id)

        assert run.attempted == 2
        assert run.processed == 1
        executor.execute.assert_called_once()
        assert executor.execute.call_args[0][0].url == 'https://shop.example/unsubscribe?id=1'

        no_url = [r for r in run.results if r['url'] is None]
        assert no_url[0]['message'] == 'No unsubscribe URL found'

        db_session.refresh(scan)
        assert scan.processed == 1

    def test_outcomes_are_recorded(self, scanner, db_session):
        scan = scanner.scan('token', 'microsoft')

        scanner.process_unsubscribes(scan.id)

        results = db_session.query(UnsubscribeResult).all()
        assert len(results) == 1
        assert results[0].method == METHOD_GET
        assert results[0].spam_email.message_id == 'm1'
        assert results[0].spam_email.is_processed is True

    def test_failed_outcome_is_not_counted(self, scanner, db_session, executor):
        executor.execute.return_value = UnsubscribeOutcome.failed(
            METHOD_FORM, 'no suitable form found', FAILURE_NO_FORM_FOUND
        )
        scan = scanner.scan('token', 'microsoft')

        run = scanner.process_unsubscribes(scan.id)

        assert run.processed == 0
        assert run.results[0]['failure'] == FAILURE_NO_FORM_FOUND

    def test_deselected_and_processed_emails_are_skipped(self, scanner, db_session, executor):
        scan = scanner.scan('token', 'microsoft')
        promo = db_session.query(SpamEmail).filter_by(message_id='m1').one()
        promo.is_selected = False
        db_session.commit()

        run = scanner.process_unsubscribes(scan.id)

        assert run.attempted == 1
        executor.execute.assert_not_called()

    def test_second_pass_does_nothing(self, scanner, executor):
        scan = scanner.scan('token', 'microsoft')
        scanner.process_unsubscribes(scan.id)

        run = scanner.process_unsubscribes(scan.id)

        # The email without a URL stays unprocessed and is reported again
        assert run.attempted == 1
        assert executor.execute.call_count == 1

    def test_restrict_to_email_ids(self, scanner, db_session, executor):
        scan = scanner.scan('token', 'microsoft')
        prize = db_session.query(SpamEmail).filter_by(message_id='m3').one()

        run = scanner.process_unsubscribes(scan.id, email_ids=[prize.id])

        assert run.attempted == 1
        executor.execute.assert_not_called()

    def test_default_executor_is_closed(self, db_session, fetcher):
        scanner = SpamScanner(db_session, fetcher, FakeClassifier())
        scan = scanner.scan('token', 'microsoft')

        with patch('src.email_processor.spam_scanner.UnsubscribeExecutor') as executor_class:
            executor_class.return_value.execute.return_value = UnsubscribeOutcome.completed(METHOD_GET, 'ok')

            run = scanner.process_unsubscribes(scan.id)

        assert run.processed == 1
        executor_class.return_value.close.assert_called_once()

    def test_injected_executor_is_not_closed(self, scanner, executor):
        scan = scanner.scan('token', 'microsoft')

        scanner.process_unsubscribes(scan.id)

        executor.close.assert_not_called()

    def test_unknown_scan(self, scanner):
        with pytest.raises(ValueError, match='Scan 999 not found'):
            scanner.process_unsubscribes(999)
