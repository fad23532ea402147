"""Read-only store seam used by the visibility engine.

The resolver, ownership checker and query engine only ever talk to a
``VolunteerStore``. Production wires in ``SqliteVolunteerStore``; tests
substitute an in-memory fake.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from pydantic import BaseModel

from app.models.registration import decode_list


@dataclass(frozen=True)
class IdentityRecord:
    role: Optional[str]
    status: str


class RegistrationRow(BaseModel):
    """A registration joined to the registrant's contact details."""

    id: str
    grid_id: str
    user_id: str
    status: str
    available_time: Optional[str] = None
    skills: list[str] = []
    equipment: list[str] = []
    notes: Optional[str] = None
    created_at: datetime
    volunteer_name: Optional[str] = None
    volunteer_phone: Optional[str] = None


class VolunteerStore(Protocol):
    def lookup_role(self, user_id: str) -> Optional[IdentityRecord]: ...

    def lookup_ownership(self, grid_id: str) -> Optional[str]: ...

    def query_registrations(
        self,
        grid_id: Optional[str],
        status: Optional[str],
        limit: int,
        offset: int,
    ) -> list[RegistrationRow]: ...

    def count_by_status(
        self, grid_id: Optional[str], status: Optional[str]
    ) -> dict[str, int]: ...


def _where_clause(grid_id: Optional[str], status: Optional[str]) -> tuple[str, list]:
    conditions: list[str] = []
    params: list = []
    if grid_id is not None:
        conditions.append("vr.grid_id = ?")
        params.append(grid_id)
    if status is not None:
        conditions.append("vr.status = ?")
        params.append(status)
    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return where, params


class SqliteVolunteerStore:
    """``VolunteerStore`` over the application's sqlite3 connection.

    Shares the connection the CRUD helpers use (opened with
    ``check_same_thread=False``); sqlite serialises concurrent calls.
    """

    def __init__(self, db: sqlite3.Connection):
        self.db = db

    def lookup_role(self, user_id: str) -> Optional[IdentityRecord]:
        row = self.db.execute(
            "SELECT role, status FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        if row is None:
            return None
        return IdentityRecord(role=row["role"], status=row["status"])

    def lookup_ownership(self, grid_id: str) -> Optional[str]:
        """Return the grid's manager id (None if unmanaged or unknown)."""
        row = self.db.execute(
            "SELECT grid_manager_id FROM grids WHERE id = ?", (grid_id,)
        ).fetchone()
        if row is None:
            return None
        return row["grid_manager_id"]

    def query_registrations(
        self,
        grid_id: Optional[str],
        status: Optional[str],
        limit: int,
        offset: int,
    ) -> list[RegistrationRow]:
        where, params = _where_clause(grid_id, status)
        sql = f"""
            SELECT vr.id, vr.grid_id, vr.user_id, vr.status, vr.available_time,
                   vr.skills, vr.equipment, vr.notes, vr.created_at,
                   u.name AS user_name, u.phone AS user_phone
            FROM volunteer_registrations vr
            LEFT JOIN users u ON u.id = vr.user_id
            {where}
            ORDER BY vr.created_at DESC, vr.id DESC
            LIMIT ? OFFSET ?
        """
        rows = self.db.execute(sql, (*params, limit, offset)).fetchall()
        return [
            RegistrationRow(
                id=row["id"],
                grid_id=row["grid_id"],
                user_id=row["user_id"],
                status=row["status"],
                available_time=row["available_time"],
                skills=decode_list(row["skills"]),
                equipment=decode_list(row["equipment"]),
                notes=row["notes"],
                created_at=row["created_at"],
                volunteer_name=row["user_name"],
                volunteer_phone=row["user_phone"],
            )
            for row in rows
        ]

    def count_by_status(
        self, grid_id: Optional[str], status: Optional[str]
    ) -> dict[str, int]:
        where, params = _where_clause(grid_id, status)
        sql = f"""
            SELECT vr.status AS status, COUNT(*) AS cnt
            FROM volunteer_registrations vr
            {where}
            GROUP BY vr.status
        """
        rows = self.db.execute(sql, params).fetchall()
        return {row["status"]: row["cnt"] for row in rows}
