"""Build the volunteer list payload from query rows and a verdict."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from app.visibility.masking import render_phone
from app.visibility.policy import VisibilityVerdict
from app.visibility.store import RegistrationRow

ANONYMOUS_VOLUNTEER_NAME = "匿名志工"


class VolunteerListItem(BaseModel):
    id: str
    grid_id: str
    user_id: str
    volunteer_name: str
    volunteer_phone: Optional[str] = None
    status: str
    available_time: Optional[str] = None
    skills: list[str] = []
    equipment: list[str] = []
    notes: Optional[str] = None
    created_date: datetime


def volunteer_name(raw: Optional[str]) -> str:
    name = (raw or "").strip()
    return name or ANONYMOUS_VOLUNTEER_NAME


def page_number(limit: int, offset: int) -> int:
    if limit <= 0:
        return 1
    return offset // limit + 1


def build_item(row: RegistrationRow, verdict: VisibilityVerdict) -> dict[str, Any]:
    """Project one row. The phone key is present only when there is a phone to show."""
    item = VolunteerListItem(
        id=row.id,
        grid_id=row.grid_id,
        user_id=row.user_id,
        volunteer_name=volunteer_name(row.volunteer_name),
        volunteer_phone=render_phone(row.volunteer_phone, verdict),
        status=row.status,
        available_time=row.available_time,
        skills=list(row.skills),
        equipment=list(row.equipment),
        notes=row.notes,
        created_date=row.created_at,
    )
    data = item.model_dump(mode="json")
    if data["volunteer_phone"] is None:
        del data["volunteer_phone"]
    return data


def assemble(
    rows: list[RegistrationRow],
    verdict: VisibilityVerdict,
    total: int,
    status_counts: Optional[dict[str, int]],
    limit: int,
    offset: int,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "data": [build_item(row, verdict) for row in rows],
        "can_view_phone": bool(verdict.can_view),
        "total": total,
        "limit": limit,
        "page": page_number(limit, offset),
    }
    if status_counts is not None:
        payload["status_counts"] = dict(status_counts)
    return payload
