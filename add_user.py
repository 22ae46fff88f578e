"""Seed a demo identity into the configured database."""
from sqlmodel import Session

from taskboard.config import get_settings
from taskboard.credentials import CredentialStore
from taskboard.database import create_db_engine, create_tables
from taskboard.errors import ConflictError

engine = create_db_engine(get_settings().database_url)

# Create tables if not exist
create_tables(engine)

with Session(engine) as db:
    try:
        user = CredentialStore(db).register(
            name="Test User",
            email="test@example.com",
            password="password",
        )
    except ConflictError:
        print("User already exists")
    else:
        print(f"Test user created: {user.email} / password (username: {user.username})")
