"""Grid route handlers."""

from __future__ import annotations

import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Request

from app.models.grid import Grid, GridCreate, create_grid, get_grid
from app.models.user import get_user

router = APIRouter(prefix="/api/grids", tags=["grids"])


def _get_db(request: Request) -> sqlite3.Connection:
    return request.app.state.db


@router.post("", status_code=201, response_model=Grid)
def add_grid(body: GridCreate, db: sqlite3.Connection = Depends(_get_db)):
    if body.grid_manager_id is not None and get_user(db, body.grid_manager_id) is None:
        raise HTTPException(status_code=404, detail="Grid manager not found")
    return create_grid(db, body)


@router.get("/{grid_id}", response_model=Grid)
def read_grid(grid_id: str, db: sqlite3.Connection = Depends(_get_db)):
    grid = get_grid(db, grid_id)
    if grid is None:
        raise HTTPException(status_code=404, detail="Grid not found")
    return grid
