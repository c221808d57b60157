"""
Database connectivity check.

    python -m sensor_api.check_db

Runs SELECT NOW() through the pool. Exits 0 if the database answered,
1 if it didn't.
"""

import logging
import sys

import psycopg2

from sensor_api.config import Config
from sensor_api.database import Database, DatabaseError

logger = logging.getLogger(__name__)


def check_database(db: Database) -> bool:
    try:
        if not db.is_connected:
            db.connect()
        row = db.check_connection()
    except (psycopg2.Error, DatabaseError) as e:
        logger.error(f"Database connection failed: {e}")
        return False
    finally:
        db.close()

    logger.info(f"Database is running. Current timestamp: {row['now']}")
    return True


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    db = Database(Config.DATABASE_URL, min_connections=1, max_connections=1)
    return 0 if check_database(db) else 1


if __name__ == "__main__":
    sys.exit(main())
