"""
Expense Tracker Test Suite

This package contains the tests for the Expense Tracker application:

- test_api_auth.py: JSON auth API (register, login, logout, me)
- test_expenses.py: JSON expense API (CRUD, filters, summary, ownership)
- test_auth.py: Login/signup/logout pages
- test_dashboard.py: Dashboard page and expense forms
- test_tokens.py: Token issuance and transport (header vs cookie, expiry)
- test_validators.py: Input validation rules
- test_expense_utils.py: Serialization and summary helpers
- test_health.py: Health check endpoint
- test_security.py: CSRF, security headers, cookie flags

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_expenses.py

Run with verbose output:
    pytest tests/ -v
"""
