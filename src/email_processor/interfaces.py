"""
Interfaces of the external collaborators used by the spam scanner.

Mail providers (Microsoft Graph, Gmail, Yahoo) and the AI spam classifier
live outside this package; anything with these method signatures can be
plugged in.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Protocol, Sequence

from .unsubscribe.types import UnsubscribeCandidate, UnsubscribeOutcome


@dataclass(frozen=True)
class Sender:
    address: str
    name: Optional[str] = None


@dataclass(frozen=True)
class MessageBody:
    content: str
    content_type: str = 'html'  # html or text


@dataclass(frozen=True)
class Message:
    """A message fetched from a provider's spam/junk folder."""

    id: str
    subject: str
    sender: Sender
    body: MessageBody
    received_at: Optional[datetime] = None


@dataclass(frozen=True)
class SpamVerdict:
    """Classifier output; confidence is 0-100."""

    is_spam: bool
    confidence: int = 0
    reasoning: str = ''


class MailFetchService(Protocol):
    def get_spam_messages(self, credentials: Any, folders: Optional[Sequence[str]] = None) -> List[Message]:
        ...


class SpamClassifier(Protocol):
    def classify(self, sender: str, subject: str, plain_text_body: str) -> SpamVerdict:
        ...


class OutcomeRecorder(Protocol):
    def record_outcome(self, candidate: UnsubscribeCandidate, outcome: UnsubscribeOutcome, **kwargs) -> Any:
        ...


class CandidateExecutor(Protocol):
    def execute(self, candidate: UnsubscribeCandidate) -> UnsubscribeOutcome:
        ...
