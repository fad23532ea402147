"""Grid manager lookups for scoped phone visibility."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Optional

from app.visibility.bounded import run_bounded
from app.visibility.store import VolunteerStore

logger = logging.getLogger(__name__)


def is_valid_grid_id(grid_id: Optional[str]) -> bool:
    """Grid ids are UUIDs; anything else is malformed."""
    if not grid_id:
        return False
    try:
        uuid.UUID(grid_id)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


class GridOwnershipChecker:
    def __init__(self, store: VolunteerStore, timeout: float, retries: int = 0):
        self.store = store
        self.timeout = timeout
        self.retries = retries

    async def is_manager_of(self, actor_id: str, grid_id: Optional[str]) -> bool:
        """True only if ``actor_id`` is the registered manager of ``grid_id``.

        Fails closed: an absent or malformed grid id, an unmanaged grid and
        any lookup error or timeout all return False.
        """
        if not is_valid_grid_id(grid_id):
            return False
        try:
            manager_id = await run_bounded(
                self.store.lookup_ownership, grid_id, timeout=self.timeout, retries=self.retries
            )
        except asyncio.TimeoutError:
            logger.warning("Ownership lookup timed out for grid %s", grid_id)
            return False
        except Exception:
            logger.warning("Ownership lookup failed for grid %s", grid_id, exc_info=True)
            return False
        return manager_id is not None and manager_id == actor_id
