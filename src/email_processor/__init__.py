"""
Email processing modules.
"""

from .interfaces import (
    Message, MessageBody, Sender, SpamVerdict,
    MailFetchService, SpamClassifier, OutcomeRecorder
)

__all__ = [
    'Message', 'MessageBody', 'Sender', 'SpamVerdict',
    'MailFetchService', 'SpamClassifier', 'OutcomeRecorder'
]
