import uuid
from datetime import datetime, timedelta, timezone

import jwt

from tms_rbac.config import settings

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def issue_access_token(
    user_id: str | uuid.UUID,
    email: str,
    name: str,
    issued_at: datetime | None = None,
) -> str:
    # whole seconds so exp - iat is exactly the configured lifetime
    iat = int((issued_at or now_utc()).timestamp())
    exp = iat + int(timedelta(minutes=settings.jwt_expires_minutes).total_seconds())
    payload = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": iat,
        "exp": exp,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")

def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=["HS256"],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        options={"require": ["sub", "iat", "exp"]},
    )
