from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, EmailStr, ConfigDict


class UserLogin(BaseModel):
    # the web client sends the same identifier as both "email" and "login"
    email: Optional[str] = None
    login: Optional[str] = None
    password: str = ""

    @property
    def identifier(self) -> str:
        return self.email or self.login or ""


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)


class UserRead(BaseModel):
    id: int
    email: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead


class MeResponse(BaseModel):
    user: UserRead
