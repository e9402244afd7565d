"""
Permission evaluation over role permission rows.

Policy:
- administrators bypass every check
- "view" is granted to every authenticated caller
- any other action needs at least one allowed row whose resource and
  action cover the request; rows with is_allowed=False never veto
"""

import logging
from collections.abc import Iterable, Sequence

from .matching import match_action, match_resource
from .store import PermissionStore


logger = logging.getLogger(__name__)

ADMIN_ROLE = "ADMIN"
FREE_ACTION = "view"


def has_permission(permissions: Iterable | None, resource: str, action: str, is_admin: bool = False) -> bool:
    """Pure check of ``resource``/``action`` against already loaded rows.

    Rows only need ``resource``, ``action`` and ``is_allowed`` attributes, so
    both ``PermissionRow`` and ORM ``RolePermission`` objects are accepted.
    """
    if is_admin:
        return True
    if action == FREE_ACTION:
        return True
    if not permissions:
        return False

    return any(
        match_resource(resource, row.resource) and match_action(action, row.action) and row.is_allowed is True
        for row in permissions
    )


def check_permission(roles: Sequence[str] | None, resource: str, action: str, store: PermissionStore) -> bool:
    """Check a request for the given roles, loading their rows from ``store``.

    Role names are expected to be normalized already (see ``roles.parse_roles``);
    the ADMIN bypass is case-sensitive. A bare string instead of a sequence of
    role names is denied, as is a failing store.
    """
    if isinstance(roles, str) or not roles:
        return False
    if ADMIN_ROLE in roles:
        return True

    try:
        rows = store.fetch_permissions_for_roles(list(roles))
    except Exception:
        logger.warning(f"Permission lookup failed for roles={list(roles)} resource={resource} action={action}; denying", exc_info=True)
        return False

    return has_permission(rows, resource, action)
