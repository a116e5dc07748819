from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict

from ..errors import DbError
from ..step import Step

logger = logging.getLogger(__name__)

SCHEMA = "CREATE TABLE IF NOT EXISTS users(id INTEGER PRIMARY KEY, name TEXT)"


def create_db_if_absent(path: Path) -> bool:
    """Create a SQLite database with the users table unless path exists.

    Returns True if the database was created. Raises DbError on failure.
    """
    path = Path(path)
    if path.exists():
        logger.info("Test database already exists. Skipping creation.")
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
        try:
            with conn:
                conn.execute(SCHEMA)
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        raise DbError(f"Failed to create test database {path}: {e}") from e
    logger.info(f"Test database created at: {path}")
    return True


class TestDatabaseStep(Step):
    """Config:
    - path: str – database file.
    """

    __test__ = False  # not a pytest class
    description = "Creating test SQLite database..."
    skip_message = "Test database already exists. Skipping creation."
    error_class = DbError

    def check(self) -> bool:
        return Path(self.config["path"]).exists()

    def run(self) -> Dict[str, Any]:
        created = create_db_if_absent(Path(self.config["path"]))
        return {"status": "success", "path": self.config["path"], "created": created}
