from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from .task import NaiveDateTime, utcnow


class User(SQLModel, table=True):
    """Registered identity.

    ``hashed_password`` is empty for identities provisioned by an external
    auth provider; ``external_id`` holds that provider's subject id.
    """
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    username: str = Field(unique=True, index=True)
    hashed_password: Optional[str] = None
    external_id: Optional[str] = Field(default=None, unique=True, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=NaiveDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=NaiveDateTime)
