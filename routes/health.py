import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

import db

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__, url_prefix='/api')


def _elapsed_ms(start):
    return round((time.perf_counter() - start) * 1000, 2)


@health_bp.route('/health')
def health():
    """Database connectivity check; 503 when the pool cannot serve a query."""
    start = time.perf_counter()
    timestamp = datetime.now(timezone.utc).isoformat()

    try:
        db_start = time.perf_counter()
        db.ping()
        db_ms = _elapsed_ms(db_start)
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return jsonify({
            "status": "unhealthy",
            "error": str(e) or e.__class__.__name__,
            "database": {"connected": False},
            "timing": {"totalResponseMs": _elapsed_ms(start)},
            "timestamp": timestamp,
        }), 503

    return jsonify({
        "status": "healthy",
        "database": {
            "connected": True,
            "host": current_app.config.get('MYSQL_HOST'),
            "name": current_app.config.get('MYSQL_DATABASE'),
        },
        "timing": {
            "databaseResponseMs": db_ms,
            "totalResponseMs": _elapsed_ms(start),
        },
        "timestamp": timestamp,
    })
