"""
Test suite for the login, signup and logout pages.
"""

import pytest
import os
import sys
from unittest.mock import MagicMock
from werkzeug.security import generate_password_hash

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flask_jwt_extended import create_access_token


def make_mock_connection():
    """Create a mock MySQL connection with cursor context manager."""
    conn = MagicMock()
    cursor = MagicMock()
    cursor.__enter__ = MagicMock(return_value=cursor)
    cursor.__exit__ = MagicMock(return_value=False)
    conn.cursor.return_value = cursor
    return conn, cursor


def login_cookie(client, app, user_id=1, email='test@example.com'):
    """Helper to give the client a valid auth cookie."""
    with app.app_context():
        token = create_access_token(identity=str(user_id), additional_claims={'email': email})
    client.set_cookie('auth-token', token)


def auth_cookie(response):
    for header in response.headers.getlist('Set-Cookie'):
        if header.startswith('auth-token='):
            return header
    return None


class TestSignup:
    """Test the signup page."""

    def test_signup_page_renders(self, client):
        """Signup page should be accessible."""
        response = client.get('/signup')
        assert response.status_code == 200
        assert b'Sign Up' in response.data

    def test_signup_valid_user(self, client_no_csrf, app_no_csrf):
        """Valid signup creates the user, sets the cookie and opens the dashboard."""
        conn, cursor = make_mock_connection()
        cursor.fetchone.return_value = None  # No existing user
        cursor.lastrowid = 3
        app_no_csrf.db_pool.get_connection.return_value = conn

        response = client_no_csrf.post('/signup', data={
            'name': 'New User',
            'email': 'newuser@example.com',
            'password': 'securepassword123',
        }, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard')
        assert auth_cookie(response) is not None
        conn.commit.assert_called_once()

    def test_signup_duplicate_email(self, client_no_csrf, app_no_csrf):
        """Signup with an existing email goes back to the form."""
        conn, cursor = make_mock_connection()
        cursor.fetchone.return_value = {'id': 1}
        app_no_csrf.db_pool.get_connection.return_value = conn

        response = client_no_csrf.post('/signup', data={
            'name': 'Another User',
            'email': 'existing@example.com',
            'password': 'securepassword123',
        })

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/signup')
        assert auth_cookie(response) is None

        with client_no_csrf.session_transaction() as sess:
            assert ('error', 'Account with this email already exists') in sess['_flashes']

    @pytest.mark.parametrize("form", [
        {'name': 'Test User', 'email': 'test@example.com', 'password': 'short'},
        {'name': 'Test User', 'email': 'not-an-email', 'password': 'password12345'},
        {'name': 'A' * 101, 'email': 'test@example.com', 'password': 'password12345'},
        {'name': '', 'email': 'test@example.com', 'password': 'password12345'},
    ])
    def test_signup_invalid_form(self, client_no_csrf, app_no_csrf, form):
        """Invalid signup forms redirect back without touching the database."""
        response = client_no_csrf.post('/signup', data=form, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/signup')
        app_no_csrf.db_pool.get_connection.assert_not_called()

    def test_signup_error_is_shown(self, client_no_csrf, app_no_csrf):
        """The flashed validation message is rendered on the form."""
        response = client_no_csrf.post('/signup', data={
            'name': 'Test User',
            'email': 'test@example.com',
            'password': 'short',
        }, follow_redirects=True)

        assert response.status_code == 200
        assert b'Password must be at least 8 characters long' in response.data


class TestLogin:
    """Test the login page."""

    def test_login_page_renders(self, client):
        response = client.get('/login')
        assert response.status_code == 200
        assert b'Log in' in response.data

    def test_login_valid_credentials(self, client_no_csrf, app_no_csrf):
        """Valid login sets the auth cookie and redirects to the dashboard."""
        conn, cursor = make_mock_connection()
        cursor.fetchone.return_value = {
            'id': 1,
            'name': 'Test User',
            'email': 'test@example.com',
            'password_hash': generate_password_hash('correctpassword'),
        }
        app_no_csrf.db_pool.get_connection.return_value = conn

        response = client_no_csrf.post('/login', data={
            'email': 'test@example.com',
            'password': 'correctpassword',
        }, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard')
        assert 'HttpOnly' in auth_cookie(response)

    def test_login_invalid_password(self, client_no_csrf, app_no_csrf):
        """Login with wrong password should fail."""
        conn, cursor = make_mock_connection()
        cursor.fetchone.return_value = {
            'id': 1,
            'name': 'Test User',
            'email': 'test@example.com',
            'password_hash': generate_password_hash('correctpassword'),
        }
        app_no_csrf.db_pool.get_connection.return_value = conn

        response = client_no_csrf.post('/login', data={
            'email': 'test@example.com',
            'password': 'wrongpassword',
        }, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/login')
        assert auth_cookie(response) is None

    def test_login_nonexistent_user(self, client_no_csrf, app_no_csrf):
        """Login with an unknown email should fail."""
        conn, cursor = make_mock_connection()
        cursor.fetchone.return_value = None
        app_no_csrf.db_pool.get_connection.return_value = conn

        response = client_no_csrf.post('/login', data={
            'email': 'nobody@example.com',
            'password': 'password123',
        }, follow_redirects=True)

        assert response.status_code == 200
        assert b'Invalid email or password' in response.data

    def test_login_page_redirects_when_authenticated(self, client_no_csrf, app_no_csrf):
        """Logged-in users skip the login and signup forms."""
        login_cookie(client_no_csrf, app_no_csrf)

        for url in ('/login', '/signup'):
            response = client_no_csrf.get(url)
            assert response.status_code == 302
            assert response.headers['Location'].endswith('/dashboard')


class TestLogout:
    """Test logout."""

    def test_logout_clears_cookie(self, client_no_csrf, app_no_csrf):
        login_cookie(client_no_csrf, app_no_csrf)

        response = client_no_csrf.post('/logout')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/login')
        assert auth_cookie(response).startswith('auth-token=;')

    def test_logout_via_get_not_allowed(self, client_no_csrf):
        response = client_no_csrf.get('/logout')
        assert response.status_code == 405
