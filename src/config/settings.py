"""
Configuration settings for the spam unsubscribe engine.
"""

import os
from pathlib import Path


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36'
)


class Config:
    """Configuration settings."""
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///spam_unsubscribe.db')
    
    # Email body settings
    MAX_BODY_LENGTH = int(os.getenv('MAX_BODY_LENGTH', '500000'))
    
    # Unsubscribe request settings
    REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '10'))
    MAX_RESPONSE_BYTES = int(os.getenv('MAX_RESPONSE_BYTES', '2000000'))
    USER_AGENT = os.getenv('USER_AGENT', DEFAULT_USER_AGENT)
    PLACEHOLDER_EMAIL = os.getenv('PLACEHOLDER_EMAIL', 'user@example.com')
    
    # Security settings
    VERIFY_SSL = os.getenv('VERIFY_SSL', 'true').lower() == 'true'
    
    # Logging settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'json')
    
    @classmethod
    def get_data_dir(cls) -> Path:
        """Get the data directory for storing the database and logs."""
        data_dir = Path(os.getenv('DATA_DIR', Path.cwd() / 'data'))
        data_dir.mkdir(exist_ok=True)
        return data_dir
        
    @classmethod
    def get_database_path(cls) -> str:
        """Get the full database URL, anchoring relative sqlite files in the data directory."""
        if cls.DATABASE_URL.startswith('sqlite:///'):
            db_file = cls.DATABASE_URL[10:]  # Remove 'sqlite:///'
            if db_file != ':memory:' and not os.path.isabs(db_file):
                db_path = cls.get_data_dir() / db_file
                return f"sqlite:///{db_path}"
        return cls.DATABASE_URL


def load_config_from_env_file(env_file: str = '.env'):
    """Load configuration from environment file."""
    env_path = Path(env_file)
    if env_path.exists():
        from dotenv import load_dotenv
        load_dotenv(env_path, override=False)
        _refresh_config()


def _refresh_config():
    """Re-read environment-backed settings after a .env file was loaded."""
    Config.DATABASE_URL = os.getenv('DATABASE_URL', Config.DATABASE_URL)
    Config.MAX_BODY_LENGTH = int(os.getenv('MAX_BODY_LENGTH', str(Config.MAX_BODY_LENGTH)))
    Config.REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', str(Config.REQUEST_TIMEOUT)))
    Config.MAX_RESPONSE_BYTES = int(os.getenv('MAX_RESPONSE_BYTES', str(Config.MAX_RESPONSE_BYTES)))
    Config.USER_AGENT = os.getenv('USER_AGENT', Config.USER_AGENT)
    Config.PLACEHOLDER_EMAIL = os.getenv('PLACEHOLDER_EMAIL', Config.PLACEHOLDER_EMAIL)
    Config.VERIFY_SSL = os.getenv('VERIFY_SSL', 'true' if Config.VERIFY_SSL else 'false').lower() == 'true'
    Config.LOG_LEVEL = os.getenv('LOG_LEVEL', Config.LOG_LEVEL)
    Config.LOG_FORMAT = os.getenv('LOG_FORMAT', Config.LOG_FORMAT)
