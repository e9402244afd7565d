import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from acca_access.database import Base, get_db_session
from acca_access.models import AppUser, RolePermission
from acca_access.security import create_access_token
from main import app


GURU_PAGES = "Dashboard,Jurnal>Jurnal=jurnal|Pengaturan Jurnal=jurnal/pengaturan"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db_session):
    users = {
        "admin": AppUser(auth_id="auth-admin", username="admin", nama="Admin", role="ADMIN", pages=None, aktif=True),
        "guru": AppUser(auth_id="auth-guru", username="guru01", nama="Bu Sari", role="guru", pages=GURU_PAGES, aktif=True),
        "inactive": AppUser(auth_id="auth-off", username="old", nama="Pak Lama", role="GURU", pages="Dashboard", aktif=False),
    }
    db_session.add_all(users.values())
    db_session.add_all(
        [
            RolePermission(role_name="GURU", resource="jurnal", action="export", is_allowed=True),
            RolePermission(role_name="GURU", resource="ketidakhadiran", action="manage", is_allowed=True),
            RolePermission(role_name="GURU", resource="nilai", action="delete", is_allowed=False),
            RolePermission(role_name="KAMAD", resource="*", action="*", is_allowed=True),
        ]
    )
    db_session.commit()
    return users


@pytest.fixture
def client(db_session, seeded):
    def override_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = override_db_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def make(auth_id: str, **kwargs) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(auth_id, **kwargs)}"}

    return make
