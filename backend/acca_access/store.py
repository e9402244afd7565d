from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import RolePermission
from .schemas import PermissionRow


class PermissionStoreError(Exception):
    pass


class PermissionStore(Protocol):
    def fetch_permissions_for_roles(self, role_names: Sequence[str]) -> list[PermissionRow]:
        ...


class SqlPermissionStore:
    """Reads ``role_permissions`` rows through a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_permissions_for_roles(self, role_names: Sequence[str]) -> list[PermissionRow]:
        if not role_names:
            return []
        stmt = select(RolePermission).where(RolePermission.role_name.in_(list(role_names)))
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise PermissionStoreError(f"Failed to load permissions for roles {list(role_names)}: {exc}") from exc
        return [PermissionRow.model_validate(row) for row in rows]
