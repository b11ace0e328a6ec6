import logging
import sqlite3
import os

logger = logging.getLogger(__name__)


def create_cache_database(db_path="rules_cache.db"):
    """Create the key/value table backing the rules cache."""

    # Ensure database directory exists (only if path contains directory)
    db_dir = os.path.dirname(str(db_path))
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
    finally:
        conn.close()
    logger.debug(f"Cache database ready at {db_path}")


if __name__ == "__main__":
    create_cache_database()
