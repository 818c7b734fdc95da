"""
Persistence of unsubscribe outcomes.

The execution engine returns outcomes synchronously and stores nothing;
the orchestrator hands each (candidate, outcome) pair to a recorder.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from src.email_processor.unsubscribe.types import UnsubscribeCandidate, UnsubscribeOutcome
from .models import UnsubscribeResult


class DatabaseOutcomeRecorder:
    """Record unsubscribe outcomes in the unsubscribe_results table."""
    
    def __init__(self, session: Session):
        self.session = session
    
    def record_outcome(
        self,
        candidate: UnsubscribeCandidate,
        outcome: UnsubscribeOutcome,
        spam_email_id: Optional[int] = None
    ) -> UnsubscribeResult:
        """
        Store one attempt.
        
        Args:
            candidate: The candidate that was executed
            outcome: The verdict returned by the execution engine
            spam_email_id: Spam email the candidate came from, if any
            
        Returns:
            The committed UnsubscribeResult row
        """
        result = UnsubscribeResult(
            spam_email_id=spam_email_id,
            url=candidate.url,
            candidate_kind=candidate.kind,
            method=outcome.method,
            succeeded=outcome.succeeded,
            status=outcome.status,
            failure=outcome.failure,
            status_code=outcome.status_code,
            message=outcome.message,
            detail=outcome.detail
        )
        self.session.add(result)
        self.session.commit()
        return result
    
    def recent_results(self, limit: int = 20) -> List[UnsubscribeResult]:
        """Most recent attempts first."""
        return (
            self.session.query(UnsubscribeResult)
            .order_by(UnsubscribeResult.attempted_at.desc(), UnsubscribeResult.id.desc())
            .limit(limit)
            .all()
        )
