from datetime import date, datetime
from decimal import Decimal

from validators import CATEGORIES, MONTH_RE

CATEGORY_COLORS = {
    "Food": "#fb923c",
    "Travel": "#3b82f6",
    "Bills": "#ef4444",
    "Shopping": "#a855f7",
    "Other": "#9ca3af",
}


def _iso(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def serialize_expense(row):
    return {
        "id": row['id'],
        "user_id": row['user_id'],
        "amount": float(row['amount']),
        "category": row['category'],
        "date": _iso(row['date']),
        "description": row.get('description') or '',
        "created_at": _iso(row.get('created_at')),
        "updated_at": _iso(row.get('updated_at')),
    }


def serialize_user(row):
    return {"id": row['id'], "email": row['email'], "name": row['name']}


def summarize_expenses(expenses):
    """
    Total and per-category breakdown of an already fetched expense list.

    Categories appear in their fixed order; categories without spending are
    left out.
    """
    total = Decimal('0')
    totals = {}
    for expense in expenses:
        amount = Decimal(str(expense['amount']))
        total += amount
        totals[expense['category']] = totals.get(expense['category'], Decimal('0')) + amount

    by_category = [
        {"category": category, "total": float(totals[category])}
        for category in CATEGORIES if category in totals
    ]
    return {"total": float(total), "count": len(expenses), "by_category": by_category}


def month_label(month):
    """"2026-10" -> "October 2026"; empty -> "all time"."""
    if not month or not MONTH_RE.match(month):
        return "all time"
    return datetime.strptime(month, "%Y-%m").strftime("%B %Y")


def current_month():
    return date.today().strftime("%Y-%m")


def today_iso():
    return date.today().isoformat()
