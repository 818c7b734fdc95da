"""
CLI session management utilities for dependency injection.
"""

from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy.orm import Session

from .database import DatabaseManager


class CLISessionManager:
    """Manages database sessions for CLI commands with dependency injection."""
    
    def __init__(self, database_url: Optional[str] = None):
        self.db_manager = DatabaseManager(database_url)
    
    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session with automatic cleanup."""
        session = self.db_manager.get_session()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Global CLI session manager instance
_cli_session_manager = None


def get_cli_session_manager(database_url: Optional[str] = None) -> CLISessionManager:
    """Get the global CLI session manager instance."""
    global _cli_session_manager
    if _cli_session_manager is None:
        _cli_session_manager = CLISessionManager(database_url)
    return _cli_session_manager
