import uuid
from dataclasses import dataclass

from tms_rbac.auth.passwords import hash_password, verify_password
from tms_rbac.auth.store import UserStore
from tms_rbac.auth.tokens import issue_access_token
from tms_rbac.errors import InvalidCredentials
from tms_rbac.logging_config import get_logger
from tms_rbac.models.user import User

log = get_logger(__name__)

@dataclass(frozen=True)
class PublicUser:
    id: uuid.UUID
    name: str
    email: str

@dataclass(frozen=True)
class AuthResult:
    access_token: str
    user: PublicUser

class AuthService:
    def __init__(self, users: UserStore):
        self.users = users

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and issue a 15 minute access token.

        Unknown email and wrong password raise the same InvalidCredentials so
        callers cannot tell which one failed.
        """
        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            log.info("login failed for %s", email)
            raise InvalidCredentials()

        token = issue_access_token(user.id, email=user.email, name=user.name)
        log.info("login ok for user %s", user.id)
        return AuthResult(
            access_token=token,
            user=PublicUser(id=user.id, name=user.name, email=user.email),
        )

    def hash_password(self, plaintext: str) -> str:
        return hash_password(plaintext)

    def validate_user(self, user_id: uuid.UUID) -> User | None:
        return self.users.find_by_id(user_id)
