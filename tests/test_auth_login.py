import uuid
from datetime import datetime, timezone

import jwt
import pytest
from sqlalchemy.orm import Session

from conftest import PASSWORD, auth, make_user
from tms_rbac.auth.passwords import hash_password, verify_password
from tms_rbac.auth.service import AuthService
from tms_rbac.auth.store import SqlUserStore
from tms_rbac.auth.tokens import decode_access_token, issue_access_token
from tms_rbac.config import settings
from tms_rbac.errors import InvalidCredentials
from tms_rbac.models.user import User

def _payload(token: str) -> dict:
    # read the claims the way a client would, without the key
    return jwt.decode(token, options={"verify_signature": False})

def test_hash_password_is_salted_bcrypt_cost_10():
    h1 = hash_password("s3cret")
    h2 = hash_password("s3cret")

    assert h1.startswith("$2b$10$")
    assert h1 != h2
    assert verify_password("s3cret", h1)
    assert not verify_password("wrong", h1)

def test_verify_password_with_malformed_hash():
    assert verify_password("s3cret", "not-a-bcrypt-hash") is False

def test_login_returns_token_and_public_user(db_session: Session):
    user = make_user(db_session, "test@example.com", name="Test User")
    result = AuthService(SqlUserStore(db_session)).login("test@example.com", PASSWORD)

    assert result.user.id == user.id
    assert result.user.name == "Test User"
    assert result.user.email == "test@example.com"
    assert not hasattr(result.user, "password_hash")

    parts = result.access_token.split(".")
    assert len(parts) == 3

    claims = _payload(result.access_token)
    assert claims["sub"] == str(user.id)
    assert claims["email"] == "test@example.com"
    assert claims["name"] == "Test User"
    assert claims["exp"] - claims["iat"] == 900

def test_token_lifetime_is_exact_regardless_of_time():
    for ts in (0.0, 1_700_000_000.999, 1_900_000_123.5):
        issued = datetime.fromtimestamp(ts, tz=timezone.utc)
        token = issue_access_token(uuid.uuid4(), "a@example.com", "A", issued_at=issued)
        claims = _payload(token)
        assert claims["exp"] - claims["iat"] == 900

def test_token_verifies_with_signing_key(db_session: Session):
    make_user(db_session, "test@example.com")
    token = AuthService(SqlUserStore(db_session)).login("test@example.com", PASSWORD).access_token

    claims = decode_access_token(token)
    assert claims["email"] == "test@example.com"

    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(token, "some-other-signing-key-of-32-bytes-or-more", algorithms=["HS256"], audience=settings.jwt_audience)

def test_expired_token_is_rejected():
    issued = datetime(2020, 1, 1, tzinfo=timezone.utc)
    token = issue_access_token(uuid.uuid4(), "a@example.com", "A", issued_at=issued)
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)

def test_wrong_password_and_unknown_email_look_the_same(db_session: Session):
    make_user(db_session, "test@example.com")
    svc = AuthService(SqlUserStore(db_session))

    with pytest.raises(InvalidCredentials) as wrong_password:
        svc.login("test@example.com", "wrongpassword")
    with pytest.raises(InvalidCredentials) as unknown_email:
        svc.login("nonexistent@example.com", PASSWORD)

    assert str(wrong_password.value) == str(unknown_email.value) == "Invalid credentials"

def test_validate_user(db_session: Session):
    user = make_user(db_session, "test@example.com")
    svc = AuthService(SqlUserStore(db_session))

    assert svc.validate_user(user.id).email == "test@example.com"
    assert svc.validate_user(uuid.uuid4()) is None

def test_service_hash_password_round_trips(db_session: Session):
    svc = AuthService(SqlUserStore(db_session))
    assert verify_password("pw", svc.hash_password("pw"))

# http

def test_login_endpoint(client, db_session: Session):
    make_user(db_session, "test@example.com", name="Test User")

    r = client.post("/auth/login", json={"email": "test@example.com", "password": PASSWORD})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "test@example.com"
    assert set(body["user"]) == {"id", "name", "email"}

    r = client.get("/auth/me", headers=auth(body["access_token"]))
    assert r.status_code == 200
    assert r.json()["name"] == "Test User"

def test_login_endpoint_invalid_credentials(client, db_session: Session):
    make_user(db_session, "test@example.com")

    r1 = client.post("/auth/login", json={"email": "test@example.com", "password": "wrongpassword"})
    r2 = client.post("/auth/login", json={"email": "nonexistent@example.com", "password": "wrongpassword"})

    assert r1.status_code == r2.status_code == 401
    assert r1.json() == r2.json() == {"detail": "Invalid credentials"}

@pytest.mark.parametrize(
    "body",
    [
        {"password": "password123"},
        {"email": "test@example.com"},
        {},
        {"email": "invalid-email", "password": "password123"},
    ],
)
def test_login_endpoint_rejects_malformed_body(client, body):
    r = client.post("/auth/login", json=body)
    assert r.status_code == 400, r.text

def test_protected_route_needs_valid_token(client, db_session: Session):
    r = client.get("/auth/me")
    assert r.status_code == 401

    r = client.get("/auth/me", headers=auth("not.a.token"))
    assert r.status_code == 401

    # well-signed token for a user that no longer exists
    ghost = issue_access_token(uuid.uuid4(), "ghost@example.com", "Ghost")
    r = client.get("/auth/me", headers=auth(ghost))
    assert r.status_code == 401

def _insert_user(db: Session, email: str, name: str = "Alice") -> User:
    # stored exactly as given, no normalization on the way in
    u = User(email=email, name=name, password_hash=hash_password(PASSWORD))
    db.add(u)
    db.commit()
    return u

def test_login_matches_stored_email_exactly(db_session: Session):
    user = _insert_user(db_session, "Alice@example.com")
    svc = AuthService(SqlUserStore(db_session))

    result = svc.login("Alice@example.com", PASSWORD)
    assert result.user.id == user.id
    assert result.user.email == "Alice@example.com"
    assert _payload(result.access_token)["email"] == "Alice@example.com"

def test_login_endpoint_with_mixed_case_email(client, db_session: Session):
    _insert_user(db_session, "Alice@example.com")

    r = client.post("/auth/login", json={"email": "Alice@example.com", "password": PASSWORD})
    assert r.status_code == 200, r.text
    assert r.json()["user"]["email"] == "Alice@example.com"
