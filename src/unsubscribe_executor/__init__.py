"""
Unsubscribe Executor Module

This module performs unsubscribe actions against third-party endpoints.
It is a pure library: callers hand it a candidate and get an outcome back.
"""

from .base_executor import BaseUnsubscribeExecutor
from .mailto_executor import MailtoExecutor
from .http_executor import HttpGetExecutor
from .form_executor import FormSubmitExecutor
from .cascade import UnsubscribeExecutor, execute_unsubscribe

__all__ = [
    'BaseUnsubscribeExecutor',
    'MailtoExecutor',
    'HttpGetExecutor',
    'FormSubmitExecutor',
    'UnsubscribeExecutor',
    'execute_unsubscribe'
]
