import uuid

from pydantic import BaseModel, ConfigDict, EmailStr

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str

class LoginOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
