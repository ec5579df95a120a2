from fastapi import APIRouter, Depends

from tms_rbac.auth.deps import get_auth_service, get_current_user
from tms_rbac.auth.service import AuthService
from tms_rbac.config import settings
from tms_rbac.models.user import User
from tms_rbac.ratelimit import rate_limit
from tms_rbac.schemas.auth import LoginIn, LoginOut, UserOut

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=LoginOut)
def login(
    payload: LoginIn,
    auth: AuthService = Depends(get_auth_service),
    _: None = Depends(
        rate_limit(
            "auth:login",
            limit_per_window=settings.rate_limit_login_per_min,
            window_seconds=60,
        )
    ),
) -> LoginOut:
    # InvalidCredentials is mapped to 401 by the app
    result = auth.login(payload.email, payload.password)
    return LoginOut(access_token=result.access_token, user=UserOut.model_validate(result.user))

@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)) -> UserOut:
    return UserOut.model_validate(user)
