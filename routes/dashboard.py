import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash

import db
from auth_utils import current_user_email, current_user_id, is_authenticated, login_required
from expense_utils import CATEGORY_COLORS, current_month, month_label, summarize_expenses, today_iso
from validators import CATEGORIES, ValidationError, parse_category_filter, parse_month, validate_expense

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__)


def expense_form_data(form):
    """Form fields arrive as strings; the validator expects a numeric amount."""
    data = {
        'category': form.get('category', '').strip(),
        'date': form.get('date', '').strip(),
        'description': form.get('description', ''),
    }
    raw_amount = form.get('amount', '').strip()
    try:
        data['amount'] = float(raw_amount)
    except ValueError:
        data['amount'] = raw_amount
    return data


def dashboard_filters():
    """Category and month from the query string; month defaults to the current one."""
    category = request.args.get('category', 'All')
    month = request.args.get('month', current_month())
    try:
        category_filter = parse_category_filter(category)
    except ValidationError as e:
        flash(e.message, "error")
        category, category_filter = 'All', None
    try:
        month_range = parse_month(month) if month else None
    except ValidationError as e:
        flash(e.message, "error")
        month, month_range = current_month(), parse_month(current_month())
    return category, category_filter, month, month_range


def current_user_name():
    user = db.get_user(current_user_id())
    return (user or {}).get('name') or current_user_email()


@dashboard_bp.route('/')
def home():
    if is_authenticated():
        return redirect(url_for('dashboard.index'))
    return redirect(url_for('auth.login'))


@dashboard_bp.route('/dashboard')
@login_required
def index():
    user_name = current_user_name()
    category, category_filter, month, month_range = dashboard_filters()
    expenses = db.list_expenses(current_user_id(), category=category_filter, month=month_range)
    summary = summarize_expenses(expenses)

    return render_template(
        "dashboard.html",
        user_name=user_name,
        expenses=expenses,
        summary=summary,
        chart_labels=[row['category'] for row in summary['by_category']],
        chart_values=[row['total'] for row in summary['by_category']],
        chart_colors=[CATEGORY_COLORS[row['category']] for row in summary['by_category']],
        categories=CATEGORIES,
        selected_category=category,
        selected_month=month,
        period_label=month_label(month),
        max_date=today_iso(),
    )


@dashboard_bp.route('/dashboard/expenses', methods=['POST'])
@login_required
def add_expense():
    try:
        fields = validate_expense(expense_form_data(request.form))
    except ValidationError as e:
        flash(e.message, "error")
        return redirect(url_for('dashboard.index'))

    row = db.create_expense(current_user_id(), fields)
    logger.info("User %s added expense %s from the dashboard", current_user_id(), row["id"])
    flash("Expense added", "success")
    return redirect(url_for('dashboard.index', month=fields['date'].strftime('%Y-%m')))


@dashboard_bp.route('/dashboard/expenses/<int:expense_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_expense(expense_id):
    if request.method == 'POST':
        try:
            fields = validate_expense(expense_form_data(request.form))
        except ValidationError as e:
            flash(e.message, "error")
            return redirect(url_for('dashboard.edit_expense', expense_id=expense_id))

        if not db.update_expense(current_user_id(), expense_id, fields):
            return "Expense not found", 404
        flash("Expense updated", "success")
        return redirect(url_for('dashboard.index', month=fields['date'].strftime('%Y-%m')))

    user_name = current_user_name()
    expense = db.get_expense(current_user_id(), expense_id)
    if not expense:
        return "Expense not found", 404
    return render_template(
        "expense_form.html",
        user_name=user_name,
        expense=expense,
        categories=CATEGORIES,
        max_date=today_iso(),
    )


@dashboard_bp.route('/dashboard/expenses/<int:expense_id>/delete', methods=['POST'])
@login_required
def delete_expense(expense_id):
    if not db.delete_expense(current_user_id(), expense_id):
        return "Expense not found", 404
    flash("Expense deleted", "success")
    return redirect(url_for('dashboard.index'))
