import logging
import secrets

from flask import Flask
from flask_wtf.csrf import CSRFProtect

from auth_utils import jwt
from config import Config
from routes.api_auth import api_auth_bp
from routes.auth import auth_bp
from routes.dashboard import dashboard_bp
from routes.expenses import expenses_bp
from routes.health import health_bp

csrf = CSRFProtect()

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'X-XSS-Protection': '1; mode=block',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
}


def currency_filter(value):
    try:
        return f"${float(value):,.2f}"
    except (ValueError, TypeError):
        return "$0.00"


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if not app.config.get("SECRET_KEY"):
        app.logger.warning("SECRET_KEY is not set; generating a temporary key")
        app.config["SECRET_KEY"] = secrets.token_hex(32)
    if not app.config.get("JWT_SECRET_KEY"):
        app.config["JWT_SECRET_KEY"] = app.config["SECRET_KEY"]

    config_class.init_db(app)

    jwt.init_app(app)
    csrf.init_app(app)
    # Token-authenticated JSON endpoints; SameSite=Lax covers the cookie path
    csrf.exempt(api_auth_bp)
    csrf.exempt(expenses_bp)

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(api_auth_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(health_bp)

    app.jinja_env.filters['currency'] = currency_filter

    @app.after_request
    def set_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    return app


if __name__ == "__main__":
    create_app().run()
