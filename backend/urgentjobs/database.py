import logging
import sqlite3
from pathlib import Path
from fastapi import Depends
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from urgentjobs.config import settings
from urgentjobs.utils.geo import haversine_km

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _configure_sqlite_connection(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    dbapi_conn.create_function("haversine_km", 4, haversine_km, deterministic=True)


def get_engine(db_path: Path | None = None):
    path = db_path or settings.database_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _configure_sqlite_connection)
    return engine


def make_session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


engine = get_engine()
SessionLocal = make_session_factory(engine)


def get_session_factory() -> sessionmaker:
    return SessionLocal


def get_db(session_factory: sessionmaker = Depends(get_session_factory)):
    # Overriding get_session_factory swaps the database for every consumer.
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- USERS & PROFILES
-- ============================================================
CREATE TABLE IF NOT EXISTS users (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    email           TEXT NOT NULL UNIQUE,
    password_hash   TEXT NOT NULL,
    first_name      TEXT NOT NULL,
    last_name       TEXT NOT NULL,
    phone           TEXT,
    profile_picture TEXT,
    role            TEXT NOT NULL CHECK(role IN ('job_seeker','employer','admin')),
    created_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);

CREATE TABLE IF NOT EXISTS job_seeker_profiles (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id            INTEGER NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
    bio                TEXT,
    skills             TEXT,
    experience_years   INTEGER,
    education          TEXT,
    availability       TEXT,
    location_latitude  REAL,
    location_longitude REAL,
    location_address   TEXT,
    created_at         TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at         TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE TABLE IF NOT EXISTS employer_profiles (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id             INTEGER NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
    company_name        TEXT NOT NULL,
    company_description TEXT,
    company_website     TEXT,
    company_logo        TEXT,
    industry            TEXT,
    location_latitude   REAL,
    location_longitude  REAL,
    location_address    TEXT,
    created_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- JOBS
-- ============================================================
CREATE TABLE IF NOT EXISTS jobs (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    employer_id        INTEGER NOT NULL REFERENCES employer_profiles(id) ON DELETE CASCADE,
    title              TEXT NOT NULL,
    description        TEXT NOT NULL,
    requirements       TEXT,
    pay_amount         REAL,
    pay_type           TEXT CHECK(pay_type IN ('hourly','fixed','daily')),
    location_latitude  REAL,
    location_longitude REAL,
    location_address   TEXT NOT NULL,
    urgency            TEXT CHECK(urgency IN ('immediate','today','this_week','flexible')),
    category           TEXT,
    start_date         TEXT,
    end_date           TEXT,
    estimated_hours    INTEGER,
    status             TEXT NOT NULL DEFAULT 'active'
                       CHECK(status IN ('active','filled','expired','draft')),
    created_at         TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at         TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_jobs_employer_id ON jobs(employer_id);
CREATE INDEX IF NOT EXISTS idx_jobs_status ON jobs(status);
CREATE INDEX IF NOT EXISTS idx_jobs_urgency ON jobs(urgency);
CREATE INDEX IF NOT EXISTS idx_jobs_category ON jobs(category);

-- ============================================================
-- APPLICATIONS
-- ============================================================
-- One row per (job, job seeker) is enforced by the application service,
-- not by a unique index.
CREATE TABLE IF NOT EXISTS job_applications (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    job_id        INTEGER NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
    job_seeker_id INTEGER NOT NULL REFERENCES job_seeker_profiles(id) ON DELETE CASCADE,
    cover_letter  TEXT,
    status        TEXT NOT NULL DEFAULT 'pending'
                  CHECK(status IN ('pending','accepted','rejected','withdrawn')),
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_applications_job_id ON job_applications(job_id);
CREATE INDEX IF NOT EXISTS idx_applications_job_seeker_id ON job_applications(job_seeker_id);
CREATE INDEX IF NOT EXISTS idx_applications_status ON job_applications(status);

-- ============================================================
-- REVIEWS
-- ============================================================
CREATE TABLE IF NOT EXISTS reviews (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    reviewer_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    reviewee_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    job_id      INTEGER REFERENCES jobs(id) ON DELETE SET NULL,
    rating      INTEGER NOT NULL CHECK(rating BETWEEN 1 AND 5),
    comment     TEXT,
    created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- NOTIFICATIONS
-- ============================================================
CREATE TABLE IF NOT EXISTS notifications (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id    INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    title      TEXT NOT NULL,
    message    TEXT NOT NULL,
    type       TEXT,
    related_id INTEGER,
    is_read    INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);
"""

# Baseline SCHEMA_SQL is version 1. Append new entries here; never edit an
# applied one.
MIGRATIONS = [
    # v2: account activation toggled from the admin console
    (2, "ALTER TABLE users ADD COLUMN active INTEGER NOT NULL DEFAULT 1"),
    # v3: notification inbox lookups
    (3, "CREATE INDEX IF NOT EXISTS idx_notifications_user_unread ON notifications(user_id, is_read)"),
]

SCHEMA_VERSION = MIGRATIONS[-1][0]


def schema_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def init_db(db_path: Path | None = None) -> int:
    """Create the baseline schema if needed and apply pending migrations.

    Runs at deploy time (``urgentjobs-migrate``) and in tests; the API
    process itself only reads the version. Returns the resulting version.
    """
    path = db_path or settings.database_path
    conn = sqlite3.connect(str(path), isolation_level=None)
    try:
        version = schema_version(conn)
        if version == 0:
            conn.executescript(SCHEMA_SQL)
            conn.execute("PRAGMA user_version = 1")
            version = 1
        for target, statement in MIGRATIONS:
            if target <= version:
                continue
            conn.execute("BEGIN")
            try:
                conn.execute(statement)
                conn.execute(f"PRAGMA user_version = {int(target)}")
                conn.execute("COMMIT")
            except sqlite3.Error:
                conn.execute("ROLLBACK")
                logger.error("Migration to schema version %d failed", target)
                raise
            logger.info("Applied migration to schema version %d", target)
            version = target
    finally:
        conn.close()
    return version


def read_schema_version(db_path: Path | None = None) -> int:
    path = db_path or settings.database_path
    conn = sqlite3.connect(str(path))
    try:
        return schema_version(conn)
    finally:
        conn.close()
