"""
Database models for spam scans and unsubscribe outcomes.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, ForeignKey,
    Boolean, create_engine, Index
)
from sqlalchemy.orm import relationship, sessionmaker, declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class EmailScan(Base):
    """One pass over a mailbox's spam folders."""
    __tablename__ = 'email_scans'

    id = Column(Integer, primary_key=True)
    provider = Column(String(50), nullable=False)  # microsoft, google, yahoo
    status = Column(String(50), default='pending')  # pending, processing, completed, failed
    total_scanned = Column(Integer, default=0)
    detected_spam = Column(Integer, default=0)
    unsubscribe_links = Column(Integer, default=0)
    processed = Column(Integer, default=0)
    error_message = Column(Text)
    started_at = Column(DateTime, default=func.now())
    completed_at = Column(DateTime)

    # Relationships
    spam_emails = relationship("SpamEmail", back_populates="scan", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<EmailScan(id={self.id}, provider='{self.provider}', status='{self.status}')>"


class SpamEmail(Base):
    """A message the classifier flagged as spam during a scan."""
    __tablename__ = 'spam_emails'

    id = Column(Integer, primary_key=True)
    scan_id = Column(Integer, ForeignKey('email_scans.id'), nullable=False)
    message_id = Column(String(255), nullable=False)  # Provider message id
    sender = Column(String(255), nullable=False)
    subject = Column(Text)
    ai_confidence = Column(Integer, default=0)  # 0-100
    ai_reasoning = Column(Text)
    has_unsubscribe_link = Column(Boolean, default=False)
    unsubscribe_url = Column(Text)
    received_at = Column(DateTime)
    is_selected = Column(Boolean, default=True)
    is_processed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    scan = relationship("EmailScan", back_populates="spam_emails")
    unsubscribe_results = relationship("UnsubscribeResult", back_populates="spam_email", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_scan_message', 'scan_id', 'message_id'),
        Index('idx_spam_sender', 'sender'),
        Index('idx_pending_unsubscribe', 'scan_id', 'is_selected', 'is_processed'),
    )

    def __repr__(self):
        return f"<SpamEmail(sender='{self.sender}', subject='{(self.subject or '')[:50]}...')>"


class UnsubscribeResult(Base):
    """Recorded outcome of one unsubscribe attempt."""
    __tablename__ = 'unsubscribe_results'

    id = Column(Integer, primary_key=True)
    spam_email_id = Column(Integer, ForeignKey('spam_emails.id'), nullable=True)
    url = Column(Text, nullable=False)
    candidate_kind = Column(String(20), nullable=False)  # link, mailto
    method = Column(String(20), nullable=False)  # get, form, mailto
    succeeded = Column(Boolean, default=False)
    status = Column(String(50), nullable=False)  # completed, instructions_only, failed
    failure = Column(String(50))  # timeout, network_failure, invalid_url, ...
    status_code = Column(Integer)
    message = Column(Text)
    detail = Column(Text)
    attempted_at = Column(DateTime, default=func.now())

    # Relationships
    spam_email = relationship("SpamEmail", back_populates="unsubscribe_results")

    __table_args__ = (
        Index('idx_result_status', 'status'),
        Index('idx_result_attempted', 'attempted_at'),
    )

    def __repr__(self):
        return f"<UnsubscribeResult(url='{self.url[:60]}', method='{self.method}', status='{self.status}')>"


def create_database_engine(database_url: str = "sqlite:///spam_unsubscribe.db"):
    """Create and return a database engine."""
    engine = create_engine(
        database_url,
        echo=False,  # Set to True for SQL debugging
        pool_pre_ping=True,
        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {}
    )
    return engine


def create_tables(engine):
    """Create all tables in the database."""
    Base.metadata.create_all(engine)


def get_session_maker(engine):
    """Get a session maker for the database."""
    return sessionmaker(bind=engine)
