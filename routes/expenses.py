import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

import db
from api_utils import error_response, register_error_handlers
from auth_utils import current_user_id
from expense_utils import serialize_expense, summarize_expenses
from validators import ValidationError, parse_category_filter, parse_month, validate_expense

logger = logging.getLogger(__name__)

expenses_bp = Blueprint('expenses', __name__, url_prefix='/api/expenses')
register_error_handlers(expenses_bp)


def parse_expense_id(raw_id):
    if not (raw_id.isascii() and raw_id.isdigit()):
        raise ValidationError("Invalid expense ID")
    return int(raw_id)


def filtered_expenses():
    category = parse_category_filter(request.args.get('category'))
    month = request.args.get('month')
    month_range = parse_month(month) if month else None
    return db.list_expenses(current_user_id(), category=category, month=month_range)


@expenses_bp.route('', methods=['GET'])
@jwt_required()
def list_expenses():
    expenses = [serialize_expense(row) for row in filtered_expenses()]
    return jsonify({"success": True, "expenses": expenses})


@expenses_bp.route('/summary', methods=['GET'])
@jwt_required()
def summary():
    expenses = filtered_expenses()
    return jsonify({"success": True, "summary": summarize_expenses(expenses)})


@expenses_bp.route('', methods=['POST'])
@jwt_required()
def create_expense():
    fields = validate_expense(request.get_json(silent=True))
    row = db.create_expense(current_user_id(), fields)
    logger.info("User %s created expense %s", current_user_id(), row['id'])
    return jsonify({"success": True, "expense": serialize_expense(row)}), 201


@expenses_bp.route('/<expense_id>', methods=['GET'])
@jwt_required()
def get_expense(expense_id):
    row = db.get_expense(current_user_id(), parse_expense_id(expense_id))
    if not row:
        return error_response("Expense not found", 404)
    return jsonify({"success": True, "expense": serialize_expense(row)})


@expenses_bp.route('/<expense_id>', methods=['PUT'])
@jwt_required()
def update_expense(expense_id):
    expense_id = parse_expense_id(expense_id)
    if not db.get_expense(current_user_id(), expense_id):
        return error_response("Expense not found", 404)
    fields = validate_expense(request.get_json(silent=True), partial=True)
    row = db.update_expense(current_user_id(), expense_id, fields)
    if not row:
        return error_response("Expense not found", 404)
    return jsonify({"success": True, "expense": serialize_expense(row)})


@expenses_bp.route('/<expense_id>', methods=['DELETE'])
@jwt_required()
def delete_expense(expense_id):
    if not db.delete_expense(current_user_id(), parse_expense_id(expense_id)):
        return error_response("Expense not found", 404)
    return jsonify({"success": True, "message": "Expense deleted successfully"})
