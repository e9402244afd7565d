import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from acca_access.models import RolePermission
from acca_access.services import (
    FULL_ADMIN_PAGES,
    build_user_profile,
    delete_role_permission,
    list_role_permissions,
    profile_has_permission,
    update_user_pages,
    upsert_role_permission,
    user_has_any_role,
    user_has_page_access,
    user_has_role,
)
from acca_access.store import PermissionStoreError, SqlPermissionStore


class BrokenStore:
    def fetch_permissions_for_roles(self, role_names):
        raise PermissionStoreError("database unavailable")


def test_profile_for_guru(db_session, seeded):
    profile = build_user_profile(seeded["guru"], SqlPermissionStore(db_session))

    assert profile.roles == ["GURU"]
    assert profile.is_admin is False
    assert profile.page_ids == ["Dashboard", "jurnal", "jurnal/pengaturan"]
    assert [node.title for node in profile.pages_tree] == ["Dashboard", "Jurnal"]
    assert len(profile.permissions) == 3


def test_profile_without_pages_falls_back_to_full_menu(db_session, seeded):
    profile = build_user_profile(seeded["admin"], SqlPermissionStore(db_session))

    assert profile.is_admin is True
    assert profile.pages == FULL_ADMIN_PAGES
    assert "dashboard" in profile.page_ids
    assert "pengaturan-users" in profile.page_ids


def test_profile_survives_store_failure(seeded):
    profile = build_user_profile(seeded["guru"], BrokenStore())

    assert profile.permissions == []
    assert profile.page_ids == ["Dashboard", "jurnal", "jurnal/pengaturan"]


def test_role_and_page_helpers(db_session, seeded):
    profile = build_user_profile(seeded["guru"], SqlPermissionStore(db_session))

    assert user_has_role(profile, "guru")
    assert not user_has_role(profile, "ADMIN")
    assert user_has_any_role(profile, ["kamad", "Guru"])
    assert not user_has_any_role(profile, ["KAMAD"])
    assert user_has_page_access(profile, "jurnal/pengaturan")
    assert not user_has_page_access(profile, "Jurnal")


def test_list_role_permissions_is_ordered(db_session, seeded):
    names = [row.role_name for row in list_role_permissions(db_session)]
    assert names == sorted(names)
    assert len(names) == 4


def test_upsert_creates_then_updates(db_session, seeded):
    created = upsert_role_permission(db_session, role_name=" tu ", resource="dokumen-siswa", action="upload", is_allowed=True)
    assert created.role_name == "TU"

    updated = upsert_role_permission(db_session, role_name="TU", resource="dokumen-siswa", action="upload", is_allowed=False)

    assert updated.id == created.id
    assert updated.is_allowed is False
    assert db_session.query(RolePermission).filter_by(role_name="TU").count() == 1


def test_upsert_rejects_blank_fields(db_session, seeded):
    with pytest.raises(HTTPException) as exc_info:
        upsert_role_permission(db_session, role_name="GURU", resource="  ", action="view", is_allowed=True)
    assert exc_info.value.status_code == 400


def test_delete_role_permission(db_session, seeded):
    permission = db_session.query(RolePermission).filter_by(role_name="KAMAD").one()

    delete_role_permission(db_session, permission_id=permission.id)

    assert db_session.get(RolePermission, permission.id) is None
    with pytest.raises(HTTPException) as exc_info:
        delete_role_permission(db_session, permission_id=permission.id)
    assert exc_info.value.status_code == 404


def test_update_user_pages(db_session, seeded):
    guru = seeded["guru"]

    profile = update_user_pages(db_session, user_id=guru.id, pages="Nilai=nilai,Absensi", store=SqlPermissionStore(db_session))

    assert profile.page_ids == ["nilai", "Absensi"]
    assert guru.pages == "Nilai=nilai,Absensi"


def test_update_user_pages_missing_user(db_session, seeded):
    store = SqlPermissionStore(db_session)

    with pytest.raises(HTTPException) as exc_info:
        update_user_pages(db_session, user_id=9999, pages="Nilai", store=store)
    assert exc_info.value.status_code == 404


def _failing_commit():
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


def test_delete_role_permission_commit_failure_rolls_back(db_session, seeded, monkeypatch):
    permission = db_session.query(RolePermission).filter_by(role_name="KAMAD").one()
    monkeypatch.setattr(db_session, "commit", _failing_commit)

    with pytest.raises(HTTPException) as exc_info:
        delete_role_permission(db_session, permission_id=permission.id)

    assert exc_info.value.status_code == 500
    monkeypatch.undo()
    assert db_session.get(RolePermission, permission.id) is not None


def test_update_user_pages_commit_failure_rolls_back(db_session, seeded, monkeypatch):
    guru = seeded["guru"]
    monkeypatch.setattr(db_session, "commit", _failing_commit)

    with pytest.raises(HTTPException) as exc_info:
        update_user_pages(db_session, user_id=guru.id, pages="Nilai", store=SqlPermissionStore(db_session))

    assert exc_info.value.status_code == 500
    monkeypatch.undo()
    assert db_session.get(type(guru), guru.id).pages != "Nilai"


def test_profile_permission_check_uses_loaded_rows(db_session, seeded):
    profile = build_user_profile(seeded["guru"], SqlPermissionStore(db_session))

    assert profile.permissions_loaded is True
    assert profile_has_permission(profile, "jurnal", "export") is True
    assert profile_has_permission(profile, "jurnal", "delete") is False
    assert profile_has_permission(profile, "jurnal", "view") is True
    assert profile_has_permission(profile, "ketidakhadiran.izin", "approve") is True


def test_profile_permission_check_admin_and_no_roles(db_session, seeded):
    store = SqlPermissionStore(db_session)
    admin = build_user_profile(seeded["admin"], store)
    seeded["guru"].role = ""
    roleless = build_user_profile(seeded["guru"], store)

    assert profile_has_permission(admin, "anything", "delete") is True
    assert profile_has_permission(roleless, "jurnal", "view") is False


def test_profile_permission_check_fails_closed_when_rows_missing(seeded):
    profile = build_user_profile(seeded["guru"], BrokenStore())

    assert profile.permissions_loaded is False
    assert profile_has_permission(profile, "jurnal", "view") is False
    assert profile_has_permission(profile, "jurnal", "export") is False
