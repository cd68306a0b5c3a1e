import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.security import check_password_hash, generate_password_hash

import db
from api_utils import error_response, register_error_handlers
from auth_utils import clear_auth_cookie, current_user_id, issue_token, set_auth_cookie
from expense_utils import serialize_user
from validators import validate_login, validate_registration

logger = logging.getLogger(__name__)

api_auth_bp = Blueprint('api_auth', __name__, url_prefix='/api/auth')
register_error_handlers(api_auth_bp)


@api_auth_bp.route('/register', methods=['POST'])
def register():
    name, email, password = validate_registration(request.get_json(silent=True) or {})

    try:
        user = db.create_user(name, email, generate_password_hash(password))
    except db.DuplicateEmailError:
        return error_response("Account with this email already exists", 409)

    response = jsonify({"success": True, "user": serialize_user(user)})
    response.status_code = 201
    return set_auth_cookie(response, issue_token(user))


@api_auth_bp.route('/login', methods=['POST'])
def login():
    email, password = validate_login(request.get_json(silent=True) or {})

    user = db.find_user_by_email(email)
    if not user or not check_password_hash(user['password_hash'], password):
        logger.info("Failed login for %s", email)
        return error_response("Invalid email or password", 401)

    response = jsonify({"success": True, "user": serialize_user(user)})
    return set_auth_cookie(response, issue_token(user))


@api_auth_bp.route('/logout', methods=['POST'])
def logout():
    response = jsonify({"success": True, "message": "Logged out successfully"})
    return clear_auth_cookie(response)


@api_auth_bp.route('/me')
@jwt_required()
def me():
    user = db.get_user(current_user_id())
    if not user:
        return error_response("User not found", 404)
    return jsonify({"success": True, "user": serialize_user(user)})
