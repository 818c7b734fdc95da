"""
Type-safe dataclasses for unsubscribe discovery and execution results.

Candidates and outcomes are immutable: a candidate is created once per
body scan and an outcome once per attempted candidate.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from .constants import (
    KIND_LINK, KIND_MAILTO,
    STATUS_COMPLETED, STATUS_INSTRUCTIONS_ONLY, STATUS_FAILED
)


@dataclass(frozen=True)
class UnsubscribeCandidate:
    """A discovered, unexecuted unsubscribe mechanism."""

    url: str
    display_text: str
    kind: str = KIND_LINK

    @property
    def is_mailto(self) -> bool:
        return self.kind == KIND_MAILTO

    @classmethod
    def from_url(cls, url: str, display_text: Optional[str] = None) -> 'UnsubscribeCandidate':
        """Rebuild a candidate from a stored URL (kind inferred from the scheme)."""
        kind = KIND_MAILTO if url.lower().startswith('mailto:') else KIND_LINK
        return cls(url=url, display_text=display_text or url, kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'display_text': self.display_text,
            'kind': self.kind
        }


@dataclass(frozen=True)
class UnsubscribeOutcome:
    """
    Best-effort verdict for one attempted candidate.

    ``succeeded`` is a heuristic, never a guarantee. ``status`` separates a
    confirmed HTTP unsubscribe (completed) from a mailto whose instructions
    were only prepared (instructions_only).
    """

    succeeded: bool
    method: str
    message: str
    detail: Optional[str] = None
    status: str = STATUS_FAILED
    failure: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def completed(cls, method: str, message: str, detail: Optional[str] = None,
                  status_code: Optional[int] = None) -> 'UnsubscribeOutcome':
        return cls(
            succeeded=True,
            method=method,
            message=message,
            detail=detail,
            status=STATUS_COMPLETED,
            status_code=status_code
        )

    @classmethod
    def instructions_only(cls, method: str, message: str,
                          detail: Optional[str] = None) -> 'UnsubscribeOutcome':
        return cls(
            succeeded=True,
            method=method,
            message=message,
            detail=detail,
            status=STATUS_INSTRUCTIONS_ONLY
        )

    @classmethod
    def failed(cls, method: str, message: str, failure: str, detail: Optional[str] = None,
               status_code: Optional[int] = None) -> 'UnsubscribeOutcome':
        return cls(
            succeeded=False,
            method=method,
            message=message,
            detail=detail,
            status=STATUS_FAILED,
            failure=failure,
            status_code=status_code
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging and CLI output."""
        result = {
            'succeeded': self.succeeded,
            'method': self.method,
            'message': self.message,
            'status': self.status
        }

        if self.detail:
            result['detail'] = self.detail
        if self.failure:
            result['failure'] = self.failure
        if self.status_code is not None:
            result['status_code'] = self.status_code

        return result


@dataclass(frozen=True)
class FormDescriptor:
    """A parsed form, used once for a single submission attempt."""

    action: str
    method: str = "POST"
    fields: Dict[str, str] = field(default_factory=dict)
