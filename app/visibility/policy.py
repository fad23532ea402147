"""Phone visibility decision table.

Rules, first match wins:
  1. Anonymous                                   -> hidden
  2. super_admin / regional_admin                -> full, any grid
  3. grid_coordinator managing the filtered grid -> full
  4. everything else                             -> hidden
"""

from __future__ import annotations

from collections import namedtuple
from enum import Enum
from typing import Optional

from app.models.user import Role
from app.visibility.actor import ActorContext, Anonymous
from app.visibility.ownership import GridOwnershipChecker


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

VisibilityVerdict = namedtuple("VisibilityVerdict", ["can_view", "show_full"])

HIDDEN = VisibilityVerdict(False, False)
FULL = VisibilityVerdict(True, True)


class RoleScope(Enum):
    NONE = "none"          # never sees phones
    GRID = "grid"          # sees phones only on grids they manage
    GLOBAL = "global"      # sees every phone


ROLE_SCOPES: dict[Role, RoleScope] = {
    Role.REGULAR_USER: RoleScope.NONE,
    Role.GRID_COORDINATOR: RoleScope.GRID,
    Role.REGIONAL_ADMIN: RoleScope.GLOBAL,
    Role.SUPER_ADMIN: RoleScope.GLOBAL,
}

_unclassified = set(Role) - set(ROLE_SCOPES)
if _unclassified:
    raise RuntimeError(
        f"Roles without a phone visibility scope: {sorted(r.value for r in _unclassified)}"
    )


# ---------------------------------------------------------------------------
# Decision
# ---------------------------------------------------------------------------

def role_scope(role: Optional[Role]) -> RoleScope:
    """Scope granted to a role; an unset role gets nothing."""
    if role is None:
        return RoleScope.NONE
    return ROLE_SCOPES.get(role, RoleScope.NONE)


async def decide(
    actor: ActorContext,
    target_grid_id: Optional[str],
    ownership: GridOwnershipChecker,
) -> VisibilityVerdict:
    """Return the phone visibility verdict for this actor and grid filter."""
    if isinstance(actor, Anonymous):
        return HIDDEN

    scope = role_scope(actor.role)
    if scope is RoleScope.GLOBAL:
        return FULL
    if scope is RoleScope.GRID and target_grid_id:
        if await ownership.is_manager_of(actor.id, target_grid_id):
            return FULL
    return HIDDEN
