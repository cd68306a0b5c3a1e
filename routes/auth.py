import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash
from werkzeug.security import generate_password_hash, check_password_hash

import db
from auth_utils import clear_auth_cookie, issue_token, redirect_if_authenticated, set_auth_cookie
from validators import MIN_PASSWORD_LENGTH, ValidationError, validate_login, validate_registration

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/signup', methods=['GET', 'POST'])
@redirect_if_authenticated
def signup():
    if request.method == 'POST':
        try:
            name, email, password = validate_registration(request.form)
        except ValidationError as e:
            flash(e.message, "error")
            return redirect(url_for('auth.signup'))

        try:
            user = db.create_user(name, email, generate_password_hash(password))
        except db.DuplicateEmailError:
            flash("Account with this email already exists", "error")
            return redirect(url_for('auth.signup'))

        response = redirect(url_for('dashboard.index'))
        return set_auth_cookie(response, issue_token(user))

    return render_template('signup.html', min_password_length=MIN_PASSWORD_LENGTH)


@auth_bp.route('/login', methods=['GET', 'POST'])
@redirect_if_authenticated
def login():
    if request.method == 'POST':
        try:
            email, password = validate_login(request.form)
        except ValidationError as e:
            flash(e.message, "error")
            return redirect(url_for('auth.login'))

        user = db.find_user_by_email(email)
        if not user or not check_password_hash(user['password_hash'], password):
            logger.info("Failed login for %s", email)
            flash("Invalid email or password. Want to sign up?", "error")
            return redirect(url_for('auth.login'))

        response = redirect(url_for('dashboard.index'))
        return set_auth_cookie(response, issue_token(user))

    return render_template('login.html')


@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = redirect(url_for('auth.login'))
    return clear_auth_cookie(response)
