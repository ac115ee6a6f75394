import sqlite3

import pytest
from sqlalchemy import func, select

from urgentjobs.database import SCHEMA_SQL, SCHEMA_VERSION, init_db, read_schema_version
from urgentjobs.migrate import main as migrate_main
from urgentjobs.utils.geo import haversine_km


class TestMigrations:
    def test_fresh_database_reaches_latest(self, db_path):
        assert init_db(db_path) == SCHEMA_VERSION
        assert read_schema_version(db_path) == SCHEMA_VERSION

    def test_init_is_idempotent(self, db_path):
        init_db(db_path)
        assert init_db(db_path) == SCHEMA_VERSION

    def test_upgrades_baseline(self, db_path):
        conn = sqlite3.connect(str(db_path))
        conn.executescript(SCHEMA_SQL)
        conn.execute("PRAGMA user_version = 1")
        conn.execute(
            "INSERT INTO users (email, password_hash, first_name, last_name, role) "
            "VALUES ('old@example.com', 'x', 'Old', 'Timer', 'job_seeker')"
        )
        conn.commit()
        conn.close()

        assert init_db(db_path) == SCHEMA_VERSION
        conn = sqlite3.connect(str(db_path))
        assert conn.execute("SELECT active FROM users").fetchone() == (1,)
        indexes = {row[1] for row in conn.execute("PRAGMA index_list('notifications')")}
        conn.close()
        assert "idx_notifications_user_unread" in indexes

    def test_migrate_command(self, db_path):
        assert migrate_main(["--db", str(db_path)]) == 0
        assert read_schema_version(db_path) == SCHEMA_VERSION

    def test_check_constraints(self, db_path):
        init_db(db_path)
        conn = sqlite3.connect(str(db_path))
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO users (email, password_hash, first_name, last_name, role) "
                "VALUES ('a@example.com', 'x', 'A', 'B', 'superuser')"
            )
        conn.close()


class TestHaversine:
    def test_known_distance(self):
        # Berlin to Paris is roughly 878 km.
        assert haversine_km(52.52, 13.405, 48.8566, 2.3522) == pytest.approx(878, abs=5)

    def test_zero_distance(self):
        assert haversine_km(10.0, 20.0, 10.0, 20.0) == pytest.approx(0.0)

    def test_missing_coordinate(self):
        assert haversine_km(52.52, 13.405, None, 2.3522) is None

    def test_registered_in_sqlite(self, session_factory):
        with session_factory() as db:
            distance = db.execute(select(func.haversine_km(52.52, 13.405, 52.52, 13.405))).scalar()
        assert distance == pytest.approx(0.0)
