import os

# must be set before tms_rbac.config is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
# nothing listens here; redis calls fail fast
os.environ["REDIS_URL"] = "redis://127.0.0.1:1/0"

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import tms_rbac.models  # noqa: F401
from tms_rbac.auth.passwords import hash_password
from tms_rbac.db import get_db
from tms_rbac.main import create_app
from tms_rbac.models.base import Base
from tms_rbac.models.enums import PermissionAction, Role
from tms_rbac.models.membership import OrgUserRole
from tms_rbac.models.org import Organization
from tms_rbac.models.permission import Permission
from tms_rbac.models.user import User
from tms_rbac.rbac.perms import iter_default_grants

PASSWORD = "password123"

@pytest.fixture()
def db_session() -> Session:
    # fresh in-memory db per test; StaticPool keeps the one connection alive
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()

@pytest.fixture()
def client(db_session: Session) -> TestClient:
    app = create_app()

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    return TestClient(app)

def make_user(db: Session, email: str, name: str | None = None, password: str = PASSWORD) -> User:
    u = User(email=email.lower(), name=name or email.split("@")[0], password_hash=hash_password(password))
    db.add(u)
    db.commit()
    return u

def make_org(db: Session, name: str, parent: Organization | None = None) -> Organization:
    o = Organization(name=name, parent_org_id=parent.id if parent else None)
    db.add(o)
    db.commit()
    return o

def add_member(db: Session, user: User, org: Organization, role: Role) -> OrgUserRole:
    m = OrgUserRole(user_id=user.id, org_id=org.id, role=role)
    db.add(m)
    db.commit()
    return m

def grant(db: Session, role: Role, feature: str, action: PermissionAction) -> Permission:
    p = Permission(role=role, feature=feature, action=action)
    db.add(p)
    db.commit()
    return p

def seed_default_grants(db: Session) -> None:
    for role, feature, action in iter_default_grants():
        db.add(Permission(role=role, feature=feature, action=action))
    db.commit()

def login(client, email: str, password: str = PASSWORD) -> str:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]

def auth(jwt: str) -> dict[str, str]:
    return {"authorization": f"bearer {jwt}"}

def uniq_email(prefix: str) -> str:
    return f"{prefix}+{uuid.uuid4().hex[:10]}@example.com"
