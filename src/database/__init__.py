"""
Database initialization and management utilities.
"""

from typing import Optional
from sqlalchemy.orm import Session

from src.config import Config
from .models import create_database_engine, create_tables, get_session_maker, Base


class DatabaseManager:
    """Manages database connections and sessions."""
    
    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or Config.get_database_path()
        self.engine = create_database_engine(self.database_url)
        self.SessionMaker = get_session_maker(self.engine)
        
    def initialize_database(self):
        """Create all tables if they don't exist."""
        create_tables(self.engine)
        
    def get_session(self) -> Session:
        """Get a new database session."""
        return self.SessionMaker()
        
    def drop_all_tables(self):
        """Drop all tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)


def init_database(database_url: Optional[str] = None) -> DatabaseManager:
    """Create a database manager and make sure its tables exist."""
    db_manager = DatabaseManager(database_url)
    db_manager.initialize_database()
    return db_manager
