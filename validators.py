"""
Input validation for accounts and expenses.

Every function raises ValidationError with a user-facing message; routes turn
that into a 400 (JSON API) or a flashed message (pages).
"""

import calendar
import math
import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

CATEGORIES = ('Food', 'Travel', 'Bills', 'Shopping', 'Other')

MIN_PASSWORD_LENGTH = 8
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255
MIN_AMOUNT = Decimal('0.01')
MAX_AMOUNT = Decimal('99999999.99')

EMAIL_RE = re.compile(r'^\S+@\S+\.\S+$')
MONTH_RE = re.compile(r'^(\d{4})-(0[1-9]|1[0-2])$')

CENTS = Decimal('0.01')


class ValidationError(ValueError):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


def _require_object(data):
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')


def normalize_email(email):
    return email.strip().lower()


def validate_registration(data):
    """Return (name, email, password) for a sign-up payload."""
    _require_object(data)
    name = data.get('name')
    email = data.get('email')
    password = data.get('password')

    if not email or not password or not name:
        raise ValidationError('Email, password, and name are required')
    if not all(isinstance(v, str) for v in (name, email, password)):
        raise ValidationError('Email, password, and name must be strings')

    name = name.strip()
    if not name:
        raise ValidationError('Email, password, and name are required')
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f'Name cannot be more than {MAX_NAME_LENGTH} characters')
    if not EMAIL_RE.match(email.strip()):
        raise ValidationError('Please enter a valid email address')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')

    return name, normalize_email(email), password


def validate_login(data):
    _require_object(data)
    email = data.get('email')
    password = data.get('password')

    if not email or not password:
        raise ValidationError('Email and password are required')
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError('Email and password must be strings')
    if not EMAIL_RE.match(email.strip()):
        raise ValidationError('Please enter a valid email address')

    return normalize_email(email), password


def parse_amount(value):
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError('Amount must be a positive number')
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError('Amount must be a positive number')
    if isinstance(value, Decimal) and not value.is_finite():
        raise ValidationError('Amount must be a positive number')
    if value <= 0:
        raise ValidationError('Amount must be a positive number')
    # quantize overflows the decimal context for huge values
    if value > MAX_AMOUNT:
        raise ValidationError('Amount is too large')

    amount = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount < MIN_AMOUNT:
        raise ValidationError('Amount must be at least 0.01')
    if amount > MAX_AMOUNT:
        raise ValidationError('Amount is too large')
    return amount


def parse_category(value):
    if value not in CATEGORIES:
        raise ValidationError('Invalid category')
    return value


def parse_date(value, today=None):
    """Accept an ISO date ("2024-01-15") or an ISO datetime ("2024-01-15T10:30:00Z")."""
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            parsed = date.fromisoformat(text)
        except ValueError:
            try:
                parsed = datetime.fromisoformat(text.replace('Z', '+00:00')).date()
            except ValueError:
                raise ValidationError('Invalid date format')
    else:
        raise ValidationError('Invalid date format')

    if parsed > (today or date.today()):
        raise ValidationError('Date cannot be in the future')
    return parsed


def parse_description(value):
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError('Description must be a string')
    if len(value) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f'Description cannot be more than {MAX_DESCRIPTION_LENGTH} characters')
    return value.strip()


def validate_expense(data, partial=False, today=None):
    """
    Validate an expense payload and return the cleaned fields.

    On create (partial=False) amount, category and date are required and the
    returned dict always carries all four fields. On update only the fields
    present in ``data`` are validated and returned.
    """
    _require_object(data)

    if not partial:
        if not data.get('amount') or not data.get('category') or not data.get('date'):
            raise ValidationError('Amount, category, and date are required')

    cleaned = {}
    if not partial or 'amount' in data:
        cleaned['amount'] = parse_amount(data.get('amount'))
    if not partial or 'category' in data:
        cleaned['category'] = parse_category(data.get('category'))
    if not partial or 'date' in data:
        cleaned['date'] = parse_date(data.get('date'), today=today)
    if not partial or 'description' in data:
        cleaned['description'] = parse_description(data.get('description'))
    return cleaned


def parse_month(value):
    """Return the first and last day of a "YYYY-MM" month."""
    match = MONTH_RE.match(value or '')
    if not match:
        raise ValidationError('Invalid month format. Use YYYY-MM')
    year, month = int(match.group(1)), int(match.group(2))
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def parse_category_filter(value):
    if not value or value == 'All':
        return None
    return parse_category(value)
