import logging
import os

import mysql.connector
from config import Config

logger = logging.getLogger(__name__)

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'schema.sql')


def split_statements(sql):
    """Split a schema file into single statements (MySQL requires one per execute)."""
    return [statement.strip() for statement in sql.split(';') if statement.strip()]


def init_db():
    conn = mysql.connector.connect(
        host=Config.MYSQL_HOST,
        port=Config.MYSQL_PORT,
        user=Config.MYSQL_USER,
        password=Config.MYSQL_PASSWORD,
        database=Config.MYSQL_DATABASE
    )
    try:
        with conn.cursor() as cur:
            with open(SCHEMA_PATH, 'r') as f:
                statements = split_statements(f.read())
            for statement in statements:
                cur.execute(statement)
            conn.commit()
        logger.info("Applied %d schema statements to %s", len(statements), Config.MYSQL_DATABASE)
    finally:
        conn.close()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
