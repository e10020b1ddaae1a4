"""SQLite connection setup and numbered migrations.

The daemon and one-off CLI commands open the same database file, so
connections use WAL plus a busy timeout rather than failing on a lock held
by the other process.
"""

import importlib
import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "snowalert.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"
BUSY_TIMEOUT_SECONDS = 30.0


def connect(db_path: str | Path, timeout: float = BUSY_TIMEOUT_SECONDS) -> sqlite3.Connection:
    """Open the state database, creating its directory on first use."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), timeout=timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending ``v###_*.py`` migrations in name order. Returns the names applied."""
    with conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_versions ("
            "  version TEXT PRIMARY KEY,"
            "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
            ")"
        )
    applied = {row["version"] for row in conn.execute("SELECT version FROM schema_versions")}

    pending = [name for name in _discover_migrations() if name not in applied]
    for name in pending:
        migration = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
        with conn:
            migration.up(conn)
            # OR IGNORE: another process may have applied it concurrently
            conn.execute("INSERT OR IGNORE INTO schema_versions (version) VALUES (?)", (name,))
        logger.info("Applied migration %s", name)
    return pending


def _discover_migrations() -> list[str]:
    return sorted(p.stem for p in MIGRATIONS_DIR.glob("v[0-9]*_*.py"))
