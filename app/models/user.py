"""User domain model: identities, roles and contact details."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.db import utc_now


class Role(str, Enum):
    REGULAR_USER = "regular_user"
    GRID_COORDINATOR = "grid_coordinator"
    REGIONAL_ADMIN = "regional_admin"
    SUPER_ADMIN = "super_admin"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Role = Role.REGULAR_USER
    status: AccountStatus = AccountStatus.ACTIVE


class User(BaseModel):
    id: str
    name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    role: Optional[str]
    status: str
    created_at: datetime


# ---------------------------------------------------------------------------
# CRUD helpers
# ---------------------------------------------------------------------------

def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        role=row["role"],
        status=row["status"],
        created_at=row["created_at"],
    )


def create_user(db: sqlite3.Connection, data: UserCreate, user_id: str | None = None) -> User:
    """Insert a new user and return the created record."""
    new_id = user_id or str(uuid.uuid4())
    db.execute(
        "INSERT INTO users (id, name, email, phone, role, status, created_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
        (new_id, data.name, data.email, data.phone, data.role.value, data.status.value, utc_now()),
    )
    db.commit()
    return get_user(db, new_id)


def get_user(db: sqlite3.Connection, user_id: str) -> Optional[User]:
    row = db.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    if row is None:
        return None
    return _row_to_user(row)
