import logging
from functools import wraps

from flask import jsonify, redirect, url_for
from flask_jwt_extended import (
    JWTManager, create_access_token, get_jwt, get_jwt_identity,
    set_access_cookies, unset_jwt_cookies, verify_jwt_in_request,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

logger = logging.getLogger(__name__)

jwt = JWTManager()


def _not_authenticated():
    return jsonify({"success": False, "error": "Not authenticated"}), 401


@jwt.unauthorized_loader
def missing_token(reason):
    return _not_authenticated()


@jwt.invalid_token_loader
def invalid_token(reason):
    logger.info("Rejected invalid token: %s", reason)
    return _not_authenticated()


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return _not_authenticated()


def issue_token(user):
    """Signed token carrying the user id (subject) and email; expiry comes from JWT_ACCESS_TOKEN_EXPIRES."""
    return create_access_token(identity=str(user['id']), additional_claims={"email": user['email']})


def set_auth_cookie(response, token):
    set_access_cookies(response, token)
    return response


def clear_auth_cookie(response):
    unset_jwt_cookies(response)
    return response


def current_user_id():
    return int(get_jwt_identity())


def current_user_email():
    return get_jwt().get('email')


def is_authenticated():
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError):
        return False
    return get_jwt_identity() is not None


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not is_authenticated():
            return redirect(url_for('auth.login'))
        return fn(*args, **kwargs)
    return wrapper


def redirect_if_authenticated(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if is_authenticated():
            return redirect(url_for('dashboard.index'))
        return fn(*args, **kwargs)
    return wrapper
