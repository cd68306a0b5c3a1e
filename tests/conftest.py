"""
Shared pytest fixtures for Expense Tracker tests.
"""

import pytest
import os
import sys
from unittest.mock import MagicMock

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Config


class TestConfig(Config):
    """Test configuration that bypasses MySQL."""
    SECRET_KEY = 'test-secret-key-for-testing-only'
    JWT_SECRET_KEY = 'test-jwt-secret-key-for-testing-only'
    TESTING = True
    WTF_CSRF_ENABLED = True
    JWT_COOKIE_SECURE = False
    MYSQL_HOST = 'db.test'
    MYSQL_DATABASE = 'expense_tracker_test'

    @staticmethod
    def init_db(app):
        """Mock DB initialization - no real MySQL needed."""
        app.db_pool = MagicMock()


def make_mock_connection():
    """Create a mock MySQL connection with cursor context manager."""
    conn = MagicMock()
    cursor = MagicMock()
    cursor.__enter__ = MagicMock(return_value=cursor)
    cursor.__exit__ = MagicMock(return_value=False)
    conn.cursor.return_value = cursor
    return conn, cursor


def make_token(app, user_id=1, email='test@example.com', **kwargs):
    """Issue a token the same way the login endpoints do."""
    from flask_jwt_extended import create_access_token
    with app.app_context():
        return create_access_token(identity=str(user_id), additional_claims={'email': email}, **kwargs)


@pytest.fixture
def app():
    """Create application for testing."""
    from app import create_app
    application = create_app(config_class=TestConfig)
    application.config['WTF_CSRF_ENABLED'] = True
    yield application


@pytest.fixture
def app_no_csrf():
    """Create application for testing without CSRF protection."""
    from app import create_app
    application = create_app(config_class=TestConfig)
    application.config['WTF_CSRF_ENABLED'] = False
    yield application


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def client_no_csrf(app_no_csrf):
    """Create test client without CSRF."""
    return app_no_csrf.test_client()


@pytest.fixture
def mock_db(app_no_csrf):
    """Provide mock database connection and cursor."""
    conn, cursor = make_mock_connection()
    app_no_csrf.db_pool.get_connection.return_value = conn
    return conn, cursor


@pytest.fixture
def auth_headers(app_no_csrf):
    """Bearer header for user 1."""
    return {'Authorization': f'Bearer {make_token(app_no_csrf)}'}


@pytest.fixture
def logged_in_client(client_no_csrf, app_no_csrf):
    """Client carrying the auth cookie for user 1."""
    client_no_csrf.set_cookie('auth-token', make_token(app_no_csrf))
    return client_no_csrf
