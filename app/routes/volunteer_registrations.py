"""Volunteer registration route handlers."""

from __future__ import annotations

import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, Security
from fastapi.security import HTTPAuthorizationCredentials

from app.models.grid import get_grid
from app.models.registration import (
    Registration,
    RegistrationCreate,
    RegistrationStatusUpdate,
    create_registration,
    delete_registration,
    get_registration,
    list_registrations,
    update_registration_status,
)
from app.models.user import get_user
from app.routes.volunteers import bearer, bearer_token
from app.visibility.tokens import actor_id_from_claims, decode_token

router = APIRouter(prefix="/api/volunteer-registrations", tags=["volunteer-registrations"])


def _get_db(request: Request) -> sqlite3.Connection:
    return request.app.state.db


@router.get("", response_model=list[Registration])
def get_registrations(db: sqlite3.Connection = Depends(_get_db)):
    """Return all registrations, newest first."""
    return list_registrations(db)


@router.post("", status_code=201, response_model=Registration)
def add_registration(body: RegistrationCreate, db: sqlite3.Connection = Depends(_get_db)):
    """Register a volunteer for a grid."""
    if get_grid(db, body.grid_id) is None:
        raise HTTPException(status_code=404, detail="Grid not found")
    if get_user(db, body.user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    return create_registration(db, body)


@router.put("/{registration_id}", response_model=Registration)
def change_registration_status(
    registration_id: str,
    body: RegistrationStatusUpdate,
    db: sqlite3.Connection = Depends(_get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer),
):
    """Update the status of the caller's own registration."""
    token = bearer_token(credentials)
    claims = decode_token(token) if token else None
    actor_id = actor_id_from_claims(claims) if claims else None
    if actor_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    registration = get_registration(db, registration_id)
    if registration is None or registration.user_id != actor_id:
        raise HTTPException(status_code=404, detail="Not found or not authorized")

    return update_registration_status(db, registration_id, body.status)


@router.delete("/{registration_id}", status_code=204)
def remove_registration(registration_id: str, db: sqlite3.Connection = Depends(_get_db)):
    if not delete_registration(db, registration_id):
        raise HTTPException(status_code=404, detail="Registration not found")
    return Response(status_code=204)
