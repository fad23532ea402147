from app.models.grid import get_grid
from app.models.registration import list_registrations
from app.seed import COORDINATOR_ID, MANAGED_GRID_ID, UNMANAGED_GRID_ID, seed_demo_data


def test_seed_creates_demo_data(db):
    assert seed_demo_data(db) == 3
    assert get_grid(db, MANAGED_GRID_ID).grid_manager_id == COORDINATOR_ID
    assert get_grid(db, UNMANAGED_GRID_ID).grid_manager_id is None
    assert len(list_registrations(db)) == 3


def test_seed_is_idempotent(db):
    seed_demo_data(db)
    assert seed_demo_data(db) == 0
    assert len(list_registrations(db)) == 3
