from typing import Annotated
from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator
from datetime import datetime

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
ProfileNameStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=40)]

class UserBase(BaseModel):
    email: EmailStr
    name: NameStr

class UserRegister(UserBase):
    password: Annotated[str, Field(min_length=8, max_length=128)]

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        if not any(c.isalpha() for c in v):
            raise ValueError("password must include a letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("password must include a digit")
        return v

class UserLogin(BaseModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=1, max_length=256)]

class ProfileUpdate(BaseModel):
    first_name: ProfileNameStr | None = None
    last_name: ProfileNameStr | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def blank_is_none(cls, v: str | None) -> str | None:
        return v or None

class UserRead(UserBase):
    id: int
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime
    model_config = {"from_attributes": True}
