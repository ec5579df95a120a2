import uuid
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from tms_rbac.models.user import User

class UserStore(Protocol):
    def find_by_email(self, email: str) -> User | None: ...

    def find_by_id(self, user_id: uuid.UUID) -> User | None: ...

class SqlUserStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        return self.db.scalar(select(User).where(User.email == email))

    def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return self.db.get(User, user_id)
