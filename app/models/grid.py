"""Grid domain model: Pydantic schemas and CRUD functions."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.db import utc_now


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class GridCreate(BaseModel):
    code: str
    grid_type: str = "manpower"
    disaster_area_id: Optional[str] = None
    grid_manager_id: Optional[str] = None
    status: str = "open"


class Grid(BaseModel):
    id: str
    code: str
    grid_type: str
    disaster_area_id: Optional[str]
    grid_manager_id: Optional[str]
    status: str
    created_at: datetime


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def _row_to_grid(row: sqlite3.Row) -> Grid:
    """Convert a sqlite3.Row into a Grid model."""
    return Grid(
        id=row["id"],
        code=row["code"],
        grid_type=row["grid_type"],
        disaster_area_id=row["disaster_area_id"],
        grid_manager_id=row["grid_manager_id"],
        status=row["status"],
        created_at=row["created_at"],
    )


def create_grid(db: sqlite3.Connection, data: GridCreate, grid_id: str | None = None) -> Grid:
    """Insert a new grid and return it."""
    new_id = grid_id or str(uuid.uuid4())
    db.execute(
        """
        INSERT INTO grids (id, code, grid_type, disaster_area_id, grid_manager_id, status, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            new_id,
            data.code,
            data.grid_type,
            data.disaster_area_id,
            data.grid_manager_id,
            data.status,
            utc_now(),
        ),
    )
    db.commit()
    return get_grid(db, new_id)


def get_grid(db: sqlite3.Connection, grid_id: str) -> Optional[Grid]:
    """Return the grid with the given id, or None if not found."""
    row = db.execute("SELECT * FROM grids WHERE id = ?", (grid_id,)).fetchone()
    if row is None:
        return None
    return _row_to_grid(row)
