import functools
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from . import lifecycle
from .credentials import CredentialStore
from .errors import AuthenticationRequired, InternalError, NotFoundError
from .models import Task, User, utcnow
from .repository import TaskRepository
from .security import AuthenticatedAs, ExternalSubject, Principal

logger = logging.getLogger(__name__)


def storage_guard(method):
    """Turn unexpected storage failures into an opaque ``InternalError``."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Storage failure in %s", method.__name__)
            raise InternalError()

    return wrapper


class TaskAccess:
    """Every task operation, scoped to the caller's identity.

    This is the only place a ``TaskRepository`` is built; callers hand in a
    principal and never an owner id.
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.identities = CredentialStore(session)
        self._tasks = TaskRepository(session, clock=clock)

    def _resolve_identity(self, principal: Principal) -> User:
        if isinstance(principal, AuthenticatedAs):
            user = self.identities.get(principal.identity_id)
        elif isinstance(principal, ExternalSubject):
            user = self.identities.get_by_external_id(principal.subject)
        else:
            raise AuthenticationRequired()
        if user is None:
            raise NotFoundError("Identity not found")
        return user

    @storage_guard
    def register_identity(
        self,
        name: str,
        email: str,
        password: Optional[str] = None,
        username: Optional[str] = None,
        external_id: Optional[str] = None,
    ) -> User:
        return self.identities.register(
            name, email, password=password, username=username, external_id=external_id
        )

    @storage_guard
    def authenticate(self, identifier: str, password: str) -> User:
        return self.identities.authenticate(identifier, password)

    @storage_guard
    def current_identity(self, principal: Principal) -> User:
        return self._resolve_identity(principal)

    @storage_guard
    def create_task(self, principal: Principal, title: str, description: Optional[str] = None) -> Task:
        owner = self._resolve_identity(principal)
        return self._tasks.create(owner.id, title, description)

    @storage_guard
    def list_tasks(self, principal: Principal) -> List[Task]:
        owner = self._resolve_identity(principal)
        return self._tasks.list_by_owner(owner.id)

    @storage_guard
    def get_task(self, principal: Principal, task_id: str) -> Task:
        owner = self._resolve_identity(principal)
        return self._tasks.find_by_id(owner.id, task_id)

    @storage_guard
    def update_task(self, principal: Principal, task_id: str, changes: dict) -> Task:
        """Apply a partial edit; only keys present in ``changes`` are touched."""
        owner = self._resolve_identity(principal)
        return self._tasks.update(owner.id, task_id, changes)

    @storage_guard
    def delete_task(self, principal: Principal, task_id: str) -> None:
        owner = self._resolve_identity(principal)
        self._tasks.delete(owner.id, task_id)

    @storage_guard
    def change_task_status(self, principal: Principal, task_id: str, status) -> Task:
        owner = self._resolve_identity(principal)
        return self._tasks.change_status(owner.id, task_id, status)

    @storage_guard
    def advance_task_status(self, principal: Principal, task_id: str) -> Task:
        """Move a task one step along the client-side status cycle."""
        owner = self._resolve_identity(principal)
        task = self._tasks.find_by_id(owner.id, task_id)
        return self._tasks.change_status(owner.id, task_id, lifecycle.next_status(task.status))
