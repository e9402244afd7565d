from collections.abc import Callable

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from .database import get_db_session
from .models import AppUser
from .schemas import UserProfile
from .security import AuthError, decode_access_token
from .services import build_user_profile, profile_has_permission, user_has_page_access
from .store import SqlPermissionStore


def _parse_token(auth_header: str | None) -> str:
    if not auth_header:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing Authorization header")
    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid auth scheme")
    return parts[1].strip()


def get_permission_store(db: Session = Depends(get_db_session)) -> SqlPermissionStore:
    return SqlPermissionStore(db)


def get_current_user(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> AppUser:
    token = _parse_token(authorization)
    try:
        payload = decode_access_token(token)
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    user = db.execute(select(AppUser).where(AppUser.auth_id == payload["sub"])).scalar_one_or_none()
    if not user or not user.aktif:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user")
    return user


def get_current_profile(
    current_user: AppUser = Depends(get_current_user),
    store: SqlPermissionStore = Depends(get_permission_store),
) -> UserProfile:
    return build_user_profile(current_user, store)


def require_admin(profile: UserProfile = Depends(get_current_profile)) -> UserProfile:
    if not profile.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return profile


def require_permission(resource: str, action: str) -> Callable:
    def dependency(profile: UserProfile = Depends(get_current_profile)) -> UserProfile:
        if not profile_has_permission(profile, resource, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {action} on {resource}",
            )
        return profile

    return dependency


def require_page(page_id: str) -> Callable:
    def dependency(profile: UserProfile = Depends(get_current_profile)) -> UserProfile:
        if not profile.is_admin and not user_has_page_access(profile, page_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Page access denied")
        return profile

    return dependency
