from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    name: str
    email: str
    password: Optional[str] = None
    username: Optional[str] = None


class UserLogin(BaseModel):
    identifier: str
    password: str


class User(BaseModel):
    id: str
    name: str
    email: str
    username: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
