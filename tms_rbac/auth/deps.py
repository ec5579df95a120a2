import uuid

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tms_rbac.auth.service import AuthService
from tms_rbac.auth.store import SqlUserStore
from tms_rbac.auth.tokens import decode_access_token
from tms_rbac.db import get_db
from tms_rbac.models.user import User

bearer = HTTPBearer(auto_error=False)

def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(SqlUserStore(db))

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    if creds is None or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="missing bearer token")

    try:
        payload = decode_access_token(creds.credentials)
        user_id = uuid.UUID(payload["sub"])
    except Exception:
        raise HTTPException(status_code=401, detail="invalid token")

    user = auth.validate_user(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="user not found")

    return user
