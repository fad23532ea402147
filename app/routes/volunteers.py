"""Volunteer list route: registrations joined to contact details."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.visibility.queries import VolunteerQueryError
from app.visibility.service import list_volunteers
from app.visibility.store import SqliteVolunteerStore

router = APIRouter(prefix="/api/volunteers", tags=["volunteers"])

bearer = HTTPBearer(auto_error=False)


def bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is None:
        return None
    return credentials.credentials


@router.get("")
async def get_volunteers(
    request: Request,
    grid_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    limit: Optional[str] = Query(None, description="Page size, clamped to 0..200"),
    offset: Optional[str] = Query(None),
    include_counts: Optional[str] = Query(None),
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer),
):
    """List volunteer registrations.

    Phone numbers are only included for callers allowed to see them;
    ``can_view_phone`` is the authoritative flag for UI gating.
    """
    store = SqliteVolunteerStore(request.app.state.db)
    try:
        return await list_volunteers(
            store,
            bearer_token(credentials),
            grid_id=grid_id,
            status=status,
            limit=limit,
            offset=offset,
            include_counts=include_counts,
        )
    except VolunteerQueryError:
        raise HTTPException(status_code=500, detail="Internal server error")
