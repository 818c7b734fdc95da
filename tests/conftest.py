"""
Shared fixtures for unsubscribe engine tests.

HTTP traffic is never real (except the explicit socket timeout test):
executors receive a Mock session whose get/post return fake responses.
"""

import pytest
from unittest.mock import Mock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.database.models import Base


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""
    def _make(status_code=200, text='', url='https://example.com/unsubscribe'):
        response = Mock()
        response.status_code = status_code
        response.text = text
        response.url = url
        response.iter_content.return_value = [text.encode('utf-8')]
        return response
    return _make


@pytest.fixture
def http_session():
    """A Mock HTTP session; configure get/post per test."""
    return Mock()


@pytest.fixture
def db_session():
    """Create an in-memory database session for testing."""
    engine = create_engine('sqlite:///:memory:')
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()
