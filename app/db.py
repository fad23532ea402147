import sqlite3
from datetime import datetime, timezone


def get_db_connection(db_path: str = ":memory:") -> sqlite3.Connection:
    """Return a sqlite3 connection with Row factory for dict-like access."""
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def utc_now() -> str:
    """ISO-8601 UTC timestamp with microseconds, used for created_at/updated_at."""
    return datetime.now(timezone.utc).isoformat()


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables (users, grids, volunteer_registrations).

    This is called by the shared test fixture so every model's tests
    start with a fully-initialised schema.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT,
            email TEXT,
            phone TEXT,
            role TEXT,
            status TEXT NOT NULL DEFAULT 'active'
                CHECK(status IN ('active', 'inactive', 'suspended')),
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS grids (
            id TEXT PRIMARY KEY,
            code TEXT NOT NULL,
            grid_type TEXT NOT NULL DEFAULT 'manpower',
            disaster_area_id TEXT,
            grid_manager_id TEXT,
            status TEXT NOT NULL DEFAULT 'open',
            created_at TEXT NOT NULL,
            FOREIGN KEY (grid_manager_id) REFERENCES users(id)
        );

        CREATE TABLE IF NOT EXISTS volunteer_registrations (
            id TEXT PRIMARY KEY,
            grid_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK(status IN ('pending', 'confirmed', 'arrived', 'completed', 'cancelled')),
            available_time TEXT,
            skills TEXT NOT NULL DEFAULT '[]',
            equipment TEXT NOT NULL DEFAULT '[]',
            notes TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (grid_id) REFERENCES grids(id) ON DELETE CASCADE,
            FOREIGN KEY (user_id) REFERENCES users(id)
        );

        CREATE INDEX IF NOT EXISTS idx_registrations_grid_created
            ON volunteer_registrations (grid_id, created_at);
        CREATE INDEX IF NOT EXISTS idx_registrations_status
            ON volunteer_registrations (status);
        """
    )
