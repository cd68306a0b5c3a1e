"""
Owner-scoped queries over the users and expenses tables.

Every helper borrows a connection from ``current_app.db_pool`` and returns it
before leaving. Expense helpers always filter on ``user_id``.
"""

import logging

from flask import current_app
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

logger = logging.getLogger(__name__)

EXPENSE_COLUMNS = "id, user_id, amount, category, date, description, created_at, updated_at"


class DuplicateEmailError(Exception):
    pass


# --------------------------------------------------------------------------
# Users
# --------------------------------------------------------------------------

def find_user_by_email(email):
    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor(dictionary=True) as cur:
            cur.execute(
                "SELECT id, name, email, password_hash FROM users WHERE email=%s",
                (email,)
            )
            return cur.fetchone()
    finally:
        conn.close()


def get_user(user_id):
    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor(dictionary=True) as cur:
            cur.execute("SELECT id, name, email FROM users WHERE id=%s", (user_id,))
            return cur.fetchone()
    finally:
        conn.close()


def create_user(name, email, password_hash):
    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor(dictionary=True) as cur:
            cur.execute("SELECT id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                raise DuplicateEmailError(email)
            try:
                cur.execute(
                    "INSERT INTO users (name, email, password_hash) VALUES (%s, %s, %s)",
                    (name, email, password_hash)
                )
            except IntegrityError as e:
                # Lost a race against a concurrent sign-up
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise DuplicateEmailError(email) from e
                raise
            conn.commit()
            user_id = cur.lastrowid
    finally:
        conn.close()

    logger.info("Created user %s", user_id)
    return {"id": user_id, "name": name, "email": email}


# --------------------------------------------------------------------------
# Expenses
# --------------------------------------------------------------------------

def list_expenses(user_id, category=None, month=None):
    """
    Return the caller's expenses, newest first.

    ``month`` is a ``(first_day, last_day)`` pair as returned by
    ``validators.parse_month``.
    """
    query = f"SELECT {EXPENSE_COLUMNS} FROM expenses WHERE user_id=%s"
    params = [user_id]
    if category:
        query += " AND category=%s"
        params.append(category)
    if month:
        query += " AND date BETWEEN %s AND %s"
        params.extend(month)
    query += " ORDER BY date DESC, created_at DESC"

    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor(dictionary=True) as cur:
            cur.execute(query, tuple(params))
            return cur.fetchall()
    finally:
        conn.close()


def _fetch_expense(cur, user_id, expense_id):
    cur.execute(
        f"SELECT {EXPENSE_COLUMNS} FROM expenses WHERE id=%s AND user_id=%s",
        (expense_id, user_id)
    )
    return cur.fetchone()


def get_expense(user_id, expense_id):
    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor(dictionary=True) as cur:
            return _fetch_expense(cur, user_id, expense_id)
    finally:
        conn.close()


def create_expense(user_id, fields):
    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor(dictionary=True) as cur:
            cur.execute(
                "INSERT INTO expenses (user_id, amount, category, date, description) "
                "VALUES (%s, %s, %s, %s, %s)",
                (user_id, fields['amount'], fields['category'], fields['date'], fields['description'])
            )
            conn.commit()
            return _fetch_expense(cur, user_id, cur.lastrowid)
    finally:
        conn.close()


def update_expense(user_id, expense_id, fields):
    """Apply ``fields`` to an owned expense; None when it does not exist for this user."""
    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor(dictionary=True) as cur:
            if not _fetch_expense(cur, user_id, expense_id):
                return None
            if fields:
                assignments = ", ".join(f"{column}=%s" for column in fields)
                cur.execute(
                    f"UPDATE expenses SET {assignments} WHERE id=%s AND user_id=%s",
                    (*fields.values(), expense_id, user_id)
                )
                conn.commit()
            return _fetch_expense(cur, user_id, expense_id)
    finally:
        conn.close()


def delete_expense(user_id, expense_id):
    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM expenses WHERE id=%s AND user_id=%s", (expense_id, user_id))
            conn.commit()
            return cur.rowcount > 0
    finally:
        conn.close()


def ping():
    conn = current_app.db_pool.get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
    finally:
        conn.close()
