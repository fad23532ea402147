"""Volunteer list entry-point.

Combines actor resolution, the visibility policy and the registration
query into a single ``list_volunteers`` call. The query runs concurrently
with the verdict; rows are only projected once the verdict is known.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from app.config import lookup_retries, lookup_timeout_seconds
from app.visibility.actor import ActorResolver
from app.visibility.assembler import assemble
from app.visibility.ownership import GridOwnershipChecker
from app.visibility.policy import decide
from app.visibility.queries import RegistrationFilters, VolunteerQueryEngine, parse_flag
from app.visibility.store import VolunteerStore


async def list_volunteers(
    store: VolunteerStore,
    credential: Optional[str],
    grid_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: Any = None,
    offset: Any = None,
    include_counts: Optional[str] = None,
    timeout: float | None = None,
    retries: int | None = None,
) -> dict[str, Any]:
    """Return the list payload for one request.

    Raises ``VolunteerQueryError`` if the registrations cannot be read.
    """
    timeout = lookup_timeout_seconds() if timeout is None else timeout
    retries = lookup_retries() if retries is None else retries

    filters = RegistrationFilters.from_params(grid_id, status, limit, offset)
    engine = VolunteerQueryEngine(store, timeout, retries)
    resolver = ActorResolver(store, timeout, retries)
    ownership = GridOwnershipChecker(store, timeout, retries)

    query_task = asyncio.create_task(engine.query(filters, parse_flag(include_counts)))
    try:
        actor = await resolver.resolve(credential)
        verdict = await decide(actor, filters.grid_id, ownership)
    except BaseException:
        query_task.cancel()
        raise
    result = await query_task

    return assemble(
        result.rows,
        verdict,
        result.total,
        result.status_counts,
        filters.limit,
        filters.offset,
    )
