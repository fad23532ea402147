"""Filtered, paginated registration queries with status aggregation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from app.models.registration import RegistrationStatus
from app.visibility.bounded import run_bounded
from app.visibility.ownership import is_valid_grid_id
from app.visibility.store import RegistrationRow, VolunteerStore

logger = logging.getLogger(__name__)

MAX_LIMIT = 200
# sqlite INTEGER is a signed 64-bit value.
MAX_OFFSET = 2**63 - 1
STATUS_VALUES = [s.value for s in RegistrationStatus]


class VolunteerQueryError(Exception):
    """The registration store could not produce a result."""


# ---------------------------------------------------------------------------
# Filter parsing
# ---------------------------------------------------------------------------

def _as_int(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def clamp_limit(raw: Any) -> int:
    """Missing, non-numeric or negative -> 200; otherwise clamped to [0, 200]."""
    value = _as_int(raw)
    if value is None or value < 0:
        return MAX_LIMIT
    return min(value, MAX_LIMIT)


def clamp_offset(raw: Any) -> int:
    """Missing, non-numeric or negative -> 0; capped at the store's integer range."""
    value = _as_int(raw)
    if value is None or value < 0:
        return 0
    return min(value, MAX_OFFSET)


def parse_flag(raw: Optional[str], default: bool = True) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() not in ("false", "0", "no", "off")


@dataclass(frozen=True)
class RegistrationFilters:
    grid_id: Optional[str] = None
    status: Optional[str] = None
    limit: int = MAX_LIMIT
    offset: int = 0

    @classmethod
    def from_params(
        cls,
        grid_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: Any = None,
        offset: Any = None,
    ) -> "RegistrationFilters":
        return cls(
            grid_id=grid_id.strip() if grid_id and grid_id.strip() else None,
            status=status.strip() if status and status.strip() else None,
            limit=clamp_limit(limit),
            offset=clamp_offset(offset),
        )

    @property
    def is_malformed(self) -> bool:
        """Filters that can never match anything."""
        if self.grid_id is not None and not is_valid_grid_id(self.grid_id):
            return True
        return self.status is not None and self.status not in STATUS_VALUES


@dataclass
class QueryResult:
    rows: list[RegistrationRow]
    total: int
    status_counts: Optional[dict[str, int]] = field(default=None)


def complete_status_counts(counts: dict[str, int]) -> dict[str, int]:
    """Every status present, absent ones as 0, in enum order."""
    return {status: int(counts.get(status, 0)) for status in STATUS_VALUES}


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class VolunteerQueryEngine:
    def __init__(self, store: VolunteerStore, timeout: float, retries: int = 0):
        self.store = store
        self.timeout = timeout
        self.retries = retries

    async def query(self, filters: RegistrationFilters, want_counts: bool) -> QueryResult:
        """Run the page query and the aggregate count for ``filters``.

        Rows are newest first with the registration id as tie-breaker.
        ``total`` ignores limit/offset and always equals the sum of the
        per-status counts. Malformed filters match nothing.
        """
        if filters.is_malformed:
            return QueryResult(
                rows=[],
                total=0,
                status_counts=complete_status_counts({}) if want_counts else None,
            )

        tasks = [
            asyncio.create_task(self._bounded(
                self.store.query_registrations,
                filters.grid_id, filters.status, filters.limit, filters.offset,
            )),
            asyncio.create_task(
                self._bounded(self.store.count_by_status, filters.grid_id, filters.status)
            ),
        ]
        try:
            rows, counts = await asyncio.gather(*tasks)
        except asyncio.TimeoutError as exc:
            logger.warning("Registration query timed out")
            raise VolunteerQueryError("registration query timed out") from exc
        except Exception as exc:
            logger.warning("Registration query failed", exc_info=True)
            raise VolunteerQueryError("registration query failed") from exc
        finally:
            # A failed or cancelled branch leaves its sibling running.
            for task in tasks:
                if not task.done():
                    task.cancel()

        status_counts = complete_status_counts(counts)
        return QueryResult(
            rows=rows,
            total=sum(status_counts.values()),
            status_counts=status_counts if want_counts else None,
        )

    async def _bounded(self, fn, *args):
        return await run_bounded(fn, *args, timeout=self.timeout, retries=self.retries)
