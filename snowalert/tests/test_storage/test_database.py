"""Tests for connection setup and the migration runner."""

from pathlib import Path

from snowalert.storage.database import connect, run_migrations


class TestMigrations:
    def test_applies_initial(self, tmp_path: Path):
        conn = connect(tmp_path / "fresh.db")
        applied = run_migrations(conn)

        assert applied == ["v001_initial", "v002_system_state"]
        tables = {
            r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        assert {"locations", "notification_keys", "check_runs", "system_state", "schema_versions"} <= tables
        conn.close()

    def test_idempotent(self, tmp_path: Path):
        conn = connect(tmp_path / "fresh.db")
        run_migrations(conn)
        assert run_migrations(conn) == []
        conn.close()

    def test_creates_parent_directory(self, tmp_path: Path):
        conn = connect(tmp_path / "nested" / "dir" / "snow.db")
        assert (tmp_path / "nested" / "dir").is_dir()
        conn.close()

    def test_wal_mode(self, db):
        mode = db.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode == "wal"

    def test_busy_timeout(self, db):
        assert db.execute("PRAGMA busy_timeout").fetchone()[0] == 30000

    def test_second_connection_sees_applied_versions(self, tmp_path: Path):
        first = connect(tmp_path / "shared.db")
        run_migrations(first)
        second = connect(tmp_path / "shared.db")

        assert run_migrations(second) == []
        first.close()
        second.close()
