import os
import sqlite3
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import Database, KeyValueRepository


class TestSchemaMigration:
    def test_adds_missing_column_and_keeps_rows(self, tmp_path):
        db_file = tmp_path / "test.db"
        conn = sqlite3.connect(str(db_file))
        conn.execute("CREATE TABLE kv_store (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
        conn.execute(
            "INSERT INTO kv_store (key, value) VALUES ('@pumpgym:workouts:anonymous', '{}')"
        )
        conn.commit()
        conn.close()

        Database(str(db_file))

        conn = sqlite3.connect(str(db_file))
        cur = conn.execute("PRAGMA table_info(kv_store)")
        cols = [row[1] for row in cur.fetchall()]
        assert cols == ["key", "value", "updated_at"]
        conn.close()
        repo = KeyValueRepository(str(db_file))
        assert repo.get("@pumpgym:workouts:anonymous") == "{}"

    def test_drops_existing_backup_table(self, tmp_path):
        db_file = tmp_path / "test.db"
        conn = sqlite3.connect(str(db_file))
        conn.execute("CREATE TABLE kv_store (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
        conn.execute("CREATE TABLE kv_store_old (key TEXT)")
        conn.commit()
        conn.close()

        Database(str(db_file))

        conn = sqlite3.connect(str(db_file))
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='kv_store_old'"
        )
        assert cur.fetchone() is None
        conn.close()

    def test_vacuum(self, tmp_path):
        repo = KeyValueRepository(str(tmp_path / "test.db"))
        repo.set("a", "1")
        repo.vacuum()
        assert repo.get("a") == "1"
