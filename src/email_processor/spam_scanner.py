"""
Spam scan and unsubscribe orchestration.

A scan fetches the spam folders of one mailbox, classifies every message,
and stores the spam ones together with their first unsubscribe candidate.
Unsubscribe processing is a separate, explicit step over the stored spam
emails, so the user can deselect messages in between.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy.orm import Session

from src.config import Config
from src.database.models import EmailScan, SpamEmail
from src.database.outcome_recorder import DatabaseOutcomeRecorder
from src.unsubscribe_executor import UnsubscribeExecutor
from .interfaces import (
    CandidateExecutor, MailFetchService, Message, OutcomeRecorder, SpamClassifier
)
from .unsubscribe import UnsubscribeCandidate, UnsubscribeLinkDiscovery, extract_text

# Set up logging
logger = logging.getLogger(__name__)


@dataclass
class UnsubscribeRun:
    """Summary of one unsubscribe pass over a scan's spam emails."""

    scan_id: int
    attempted: int = 0
    processed: int = 0
    results: List[Dict[str, Any]] = field(default_factory=list)


class SpamScanner:
    """Scan spam folders and run unsubscribes for the spam that was found."""

    def __init__(
        self,
        session: Session,
        fetcher: MailFetchService,
        classifier: SpamClassifier,
        executor: Optional[CandidateExecutor] = None,
        recorder: Optional[OutcomeRecorder] = None,
        max_body_length: Optional[int] = None
    ):
        self.session = session
        self.fetcher = fetcher
        self.classifier = classifier
        self.executor = executor
        self.recorder = recorder if recorder is not None else DatabaseOutcomeRecorder(session)
        self.discovery = UnsubscribeLinkDiscovery()
        self.max_body_length = max_body_length or Config.MAX_BODY_LENGTH

    def scan(self, credentials: Any, provider: str, folders: Optional[Sequence[str]] = None) -> EmailScan:
        """
        Fetch, classify and store spam for one mailbox.

        Args:
            credentials: Provider credentials, passed through to the fetcher
            provider: microsoft, google or yahoo
            folders: Folders to scan (fetcher default when omitted)

        Returns:
            The EmailScan row, completed or failed
        """
        scan = EmailScan(provider=provider, status='processing')
        self.session.add(scan)
        self.session.commit()

        scan_start = time.monotonic()
        logger.info(f"Starting email scan {scan.id} for provider {provider}")

        try:
            messages = self.fetcher.get_spam_messages(credentials, folders)
        except Exception as e:
            logger.error(f"Scan {scan.id} failed while fetching messages: {e}")
            scan.status = 'failed'
            scan.error_message = str(e)
            scan.completed_at = datetime.now()
            self.session.commit()
            return scan

        scan.total_scanned = len(messages)
        self.session.commit()
        logger.info(f"Fetched {len(messages)} messages for scan {scan.id}")

        for index, message in enumerate(messages, start=1):
            spam_email = self._process_message(scan, message, index, len(messages))
            if spam_email is None:
                continue
            scan.detected_spam += 1
            if spam_email.has_unsubscribe_link:
                scan.unsubscribe_links += 1

        scan.status = 'completed'
        scan.completed_at = datetime.now()
        self.session.commit()

        logger.info(
            f"Scan {scan.id} completed: {scan.detected_spam}/{scan.total_scanned} spam, "
            f"{scan.unsubscribe_links} with unsubscribe links in {time.monotonic() - scan_start:.1f}s"
        )
        return scan

    def _process_message(self, scan: EmailScan, message: Message, index: int, total: int) -> Optional[SpamEmail]:
        content = (message.body.content or '')[:self.max_body_length]
        sender = message.sender.address

        logger.debug(f"[{index}/{total}] Processing '{message.subject}' from {sender}")

        try:
            verdict = self.classifier.classify(sender, message.subject, extract_text(content))
        except Exception as e:
            logger.warning(f"[{index}/{total}] Classification failed for message {message.id}: {e}")
            return None

        if not verdict.is_spam:
            return None

        candidates = self.discovery.discover(content)
        logger.debug(f"[{index}/{total}] Spam ({verdict.confidence}%), {len(candidates)} unsubscribe candidates")

        spam_email = SpamEmail(
            scan_id=scan.id,
            message_id=message.id,
            sender=sender,
            subject=message.subject,
            ai_confidence=verdict.confidence,
            ai_reasoning=verdict.reasoning,
            has_unsubscribe_link=bool(candidates),
            unsubscribe_url=candidates[0].url if candidates else None,
            received_at=message.received_at
        )
        self.session.add(spam_email)
        self.session.commit()
        return spam_email

    def process_unsubscribes(self, scan_id: int, email_ids: Optional[Sequence[int]] = None) -> UnsubscribeRun:
        """
        Execute the unsubscribe cascade for the selected spam emails of a scan.

        Args:
            scan_id: Scan whose spam emails are processed
            email_ids: Restrict to these spam email ids (all selected emails when omitted)

        Returns:
            UnsubscribeRun with one result entry per email
        """
        scan = self.session.get(EmailScan, scan_id)
        if scan is None:
            raise ValueError(f"Scan {scan_id} not found")

        query = self.session.query(SpamEmail).filter(
            SpamEmail.scan_id == scan_id,
            SpamEmail.is_selected.is_(True),
            SpamEmail.is_processed.is_(False)
        )
        if email_ids is not None:
            query = query.filter(SpamEmail.id.in_(list(email_ids)))
        emails = query.order_by(SpamEmail.id).all()

        run = UnsubscribeRun(scan_id=scan_id)
        logger.info(f"Starting unsubscribe processing for {len(emails)} emails of scan {scan_id}")

        # A default executor owns its HTTP session for this pass only
        owns_executor = self.executor is None
        executor = UnsubscribeExecutor() if owns_executor else self.executor
        try:
            for spam_email in emails:
                self._unsubscribe_email(spam_email, executor, run)
        finally:
            if owns_executor:
                executor.close()

        scan.processed = (scan.processed or 0) + run.processed
        self.session.commit()

        logger.info(f"Unsubscribe processing completed: {run.processed}/{run.attempted} successful")
        return run

    def _unsubscribe_email(self, spam_email: SpamEmail, executor: CandidateExecutor, run: UnsubscribeRun):
        run.attempted += 1

        if not spam_email.unsubscribe_url:
            logger.info(f"Email {spam_email.id} from {spam_email.sender} has no unsubscribe URL")
            run.results.append({
                'email_id': spam_email.id,
                'sender': spam_email.sender,
                'url': None,
                'succeeded': False,
                'message': 'No unsubscribe URL found',
                'method': None
            })
            return

        candidate = UnsubscribeCandidate.from_url(spam_email.unsubscribe_url)
        outcome = executor.execute(candidate)
        self.recorder.record_outcome(candidate, outcome, spam_email_id=spam_email.id)

        spam_email.is_processed = True
        if outcome.succeeded:
            run.processed += 1
            logger.info(f"Unsubscribed from {spam_email.sender} via {outcome.method}")
        else:
            logger.info(f"Unsubscribe failed for {spam_email.sender}: {outcome.message}")

        run.results.append({
            'email_id': spam_email.id,
            'sender': spam_email.sender,
            'url': candidate.url,
            **outcome.to_dict()
        })
