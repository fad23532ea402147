"""Resolve an optional bearer credential into the actor for one request."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from app.models.user import AccountStatus, Role
from app.visibility.bounded import run_bounded
from app.visibility.store import VolunteerStore
from app.visibility.tokens import actor_id_from_claims, decode_token

logger = logging.getLogger(__name__)

_BLOCKED_STATUSES = {AccountStatus.SUSPENDED.value, AccountStatus.INACTIVE.value}


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Identified:
    id: str
    role: Optional[Role]  # None: role unknown, lookup failed or account blocked


ActorContext = Union[Anonymous, Identified]

ANONYMOUS = Anonymous()


def parse_role(raw: Optional[str]) -> Optional[Role]:
    """Map a stored role string onto the closed enum; unknown roles become None."""
    if raw is None:
        return None
    try:
        return Role(raw)
    except ValueError:
        return None


class ActorResolver:
    def __init__(self, store: VolunteerStore, timeout: float, retries: int = 0):
        self.store = store
        self.timeout = timeout
        self.retries = retries

    async def resolve(self, credential: Optional[str]) -> ActorContext:
        """Return the request's actor. Never raises on a bad credential.

        A missing, malformed, expired or badly signed token is Anonymous.
        A valid token whose role cannot be looked up yields an Identified
        actor with no role.
        """
        if not credential:
            return ANONYMOUS

        claims = decode_token(credential)
        if claims is None:
            logger.debug("Bearer credential rejected")
            return ANONYMOUS

        actor_id = actor_id_from_claims(claims)
        if actor_id is None:
            logger.debug("Bearer credential carries no actor id")
            return ANONYMOUS

        return Identified(id=actor_id, role=await self._lookup_role(actor_id))

    async def _lookup_role(self, actor_id: str) -> Optional[Role]:
        try:
            record = await run_bounded(
                self.store.lookup_role, actor_id, timeout=self.timeout, retries=self.retries
            )
        except asyncio.TimeoutError:
            logger.warning("Role lookup timed out for actor %s", actor_id)
            return None
        except Exception:
            logger.warning("Role lookup failed for actor %s", actor_id, exc_info=True)
            return None

        if record is None or record.status in _BLOCKED_STATUSES:
            return None
        return parse_role(record.role)
