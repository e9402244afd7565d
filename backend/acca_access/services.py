import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import AppUser, RolePermission
from .pages import parse_pages
from .permissions import ADMIN_ROLE, has_permission
from .roles import parse_roles
from .schemas import UserProfile
from .store import PermissionStore


logger = logging.getLogger(__name__)

FULL_ADMIN_PAGES = (
    "Dashboard=dashboard,Jurnal Guru=jurnal,Absensi Siswa=absensi,LCKH Submission=lckh,"
    "LCKH Approval=lckh-approval,Nilai=nilai,Tugas Tambahan=tugas-tambahan,"
    "Laporan Guru Asuh=laporan-guru-asuh,Ketidakhadiran=ketidakhadiran,"
    "Informasi Akademik=informasi-akademik,Upload Dokumen=dokumen-siswa,Laporan Piket=piket,"
    "Master Data=master,Pengaturan Data=pengaturan-data,Pengaturan Tugas=pengaturan-tugas,"
    "Pengaturan Users=pengaturan-users,Reset Data=reset-data,Campione=campione"
)


def build_user_profile(user: AppUser, store: PermissionStore) -> UserProfile:
    roles = parse_roles(user.role)
    effective_pages = user.pages or FULL_ADMIN_PAGES
    parsed = parse_pages(effective_pages)

    permissions = []
    permissions_loaded = False
    try:
        permissions = store.fetch_permissions_for_roles(roles)
        permissions_loaded = True
    except Exception as exc:
        logger.error(f"Error fetching permissions for user {user.id}: {exc}")

    return UserProfile(
        id=user.id,
        auth_id=user.auth_id,
        username=user.username or "",
        nama=user.nama or "User",
        role=user.role or "",
        roles=roles,
        is_admin=ADMIN_ROLE in roles,
        pages=effective_pages,
        page_ids=parsed.flat_identifiers,
        pages_tree=parsed.tree,
        aktif=bool(user.aktif),
        permissions=permissions,
        permissions_loaded=permissions_loaded,
    )


def user_has_role(profile: UserProfile, role: str) -> bool:
    return role.upper() in profile.roles


def user_has_any_role(profile: UserProfile, roles: list[str]) -> bool:
    held = set(profile.roles)
    return any(role.upper() in held for role in roles)


def user_has_page_access(profile: UserProfile, page_id: str) -> bool:
    return page_id in profile.page_ids


def profile_has_permission(profile: UserProfile, resource: str, action: str) -> bool:
    """Same outcome as ``check_permission`` but reuses the rows loaded with the profile."""
    if not profile.roles:
        return False
    if profile.is_admin:
        return True
    if not profile.permissions_loaded:
        return False
    return has_permission(profile.permissions, resource, action)


def list_role_permissions(db: Session) -> list[RolePermission]:
    stmt = select(RolePermission).order_by(RolePermission.role_name, RolePermission.resource, RolePermission.action)
    return list(db.execute(stmt).scalars().all())


def upsert_role_permission(
    db: Session,
    *,
    role_name: str,
    resource: str,
    action: str,
    is_allowed: bool,
) -> RolePermission:
    role_name = role_name.strip().upper()
    resource = resource.strip()
    action = action.strip()
    if not role_name or not resource or not action:
        raise HTTPException(status_code=400, detail="Missing required fields")

    permission = db.execute(
        select(RolePermission).where(
            RolePermission.role_name == role_name,
            RolePermission.resource == resource,
            RolePermission.action == action,
        )
    ).scalar_one_or_none()

    if permission is None:
        permission = RolePermission(role_name=role_name, resource=resource, action=action)
        db.add(permission)
    permission.is_allowed = is_allowed

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Error saving role permission {role_name}/{resource}/{action}: {exc}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save permission") from exc
    db.refresh(permission)
    return permission


def delete_role_permission(db: Session, *, permission_id: int) -> None:
    permission = db.get(RolePermission, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")
    db.delete(permission)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Error deleting role permission {permission_id}: {exc}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete permission") from exc


def update_user_pages(db: Session, *, user_id: int, pages: str, store: PermissionStore) -> UserProfile:
    user = db.get(AppUser, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    parsed = parse_pages(pages)
    logger.info(f"Updating pages for user {user_id}: {len(parsed.flat_identifiers)} page(s), {len(parsed.tree)} menu entries")

    user.pages = pages
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Error updating pages for user {user_id}: {exc}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update pages") from exc
    db.refresh(user)
    return build_user_profile(user, store)
