import uuid
from pydantic import BaseModel, ConfigDict

class TaskCreateIn(BaseModel):
    title: str
    description: str | None = None
    is_completed: bool = False
    category: str | None = None

class TaskUpdateIn(BaseModel):
    title: str | None = None
    description: str | None = None
    is_completed: bool | None = None
    category: str | None = None

class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    org_id: int
    owner_id: uuid.UUID
    title: str
    description: str | None
    is_completed: bool
    category: str | None
