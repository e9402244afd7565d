from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .database import get_db_session
from .middleware import get_current_profile, get_permission_store, require_admin
from .pages import parse_pages
from .schemas import (
    PagesPreviewRequest,
    ParsedPages,
    PermissionCheckResponse,
    RolePermissionOut,
    RolePermissionUpsertRequest,
    UserPagesUpdateRequest,
    UserProfile,
)
from .services import (
    delete_role_permission,
    list_role_permissions,
    profile_has_permission,
    update_user_pages,
    upsert_role_permission,
)
from .store import SqlPermissionStore

router = APIRouter(prefix="/api/v1/access", tags=["Access"])


@router.get("/me", response_model=UserProfile)
def me(profile: UserProfile = Depends(get_current_profile)):
    return profile


@router.get("/permissions/check", response_model=PermissionCheckResponse)
def permission_check(
    resource: str = Query(min_length=1),
    action: str = Query(min_length=1),
    profile: UserProfile = Depends(get_current_profile),
):
    allowed = profile_has_permission(profile, resource, action)
    return PermissionCheckResponse(resource=resource, action=action, allowed=allowed)


@router.post("/pages/preview", response_model=ParsedPages)
def preview_pages(payload: PagesPreviewRequest, _: UserProfile = Depends(require_admin)):
    return parse_pages(payload.pages)


@router.get("/admin/role-permissions", response_model=list[RolePermissionOut])
def get_role_permissions(
    db: Session = Depends(get_db_session),
    _: UserProfile = Depends(require_admin),
):
    return list_role_permissions(db)


@router.post("/admin/role-permissions", response_model=RolePermissionOut)
def save_role_permission(
    payload: RolePermissionUpsertRequest,
    db: Session = Depends(get_db_session),
    _: UserProfile = Depends(require_admin),
):
    return upsert_role_permission(
        db,
        role_name=payload.role_name,
        resource=payload.resource,
        action=payload.action,
        is_allowed=payload.is_allowed,
    )


@router.delete("/admin/role-permissions/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_role_permission(
    permission_id: int,
    db: Session = Depends(get_db_session),
    _: UserProfile = Depends(require_admin),
):
    delete_role_permission(db, permission_id=permission_id)


@router.put("/admin/users/{user_id}/pages", response_model=UserProfile)
def put_user_pages(
    user_id: int,
    payload: UserPagesUpdateRequest,
    db: Session = Depends(get_db_session),
    store: SqlPermissionStore = Depends(get_permission_store),
    _: UserProfile = Depends(require_admin),
):
    return update_user_pages(db, user_id=user_id, pages=payload.pages, store=store)
