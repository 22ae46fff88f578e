"""FastAPI dependencies shared by the REST routers and the GraphQL context."""

from fastapi import Depends, Request
from sqlmodel import Session

from .access import TaskAccess
from .config import Settings
from .database import get_db
from .security import Principal, get_token_from_request, resolve_principal


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_principal(request: Request, settings: Settings = Depends(get_app_settings)) -> Principal:
    return resolve_principal(get_token_from_request(request), settings)


def get_task_access(request: Request, db: Session = Depends(get_db)) -> TaskAccess:
    return TaskAccess(db, clock=request.app.state.clock)
