"""Tests for /api/grids."""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.user import Role, UserCreate, create_user


@pytest.fixture
def client(db):
    app.state.db = db
    return TestClient(app)


def test_create_and_read_grid(client, db):
    coordinator = create_user(db, UserCreate(name="Lin", role=Role.GRID_COORDINATOR))
    resp = client.post("/api/grids", json={"code": "A-1", "grid_manager_id": coordinator.id})
    assert resp.status_code == 201
    grid = resp.json()
    assert grid["grid_manager_id"] == coordinator.id
    assert grid["status"] == "open"

    resp = client.get(f"/api/grids/{grid['id']}")
    assert resp.status_code == 200
    assert resp.json()["code"] == "A-1"


def test_unknown_manager_rejected(client):
    resp = client.post("/api/grids", json={"code": "A-1", "grid_manager_id": "nobody"})
    assert resp.status_code == 404


def test_missing_grid(client):
    assert client.get("/api/grids/nope").status_code == 404
