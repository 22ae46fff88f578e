import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from sqlmodel import Session, select

from . import lifecycle
from .errors import NotFoundError
from .models import Task, TaskStatus, utcnow

logger = logging.getLogger(__name__)


class TaskRepository:
    """Owner-scoped persistence for tasks.

    Every lookup filters on both task id and owner id, so a task owned by
    someone else is indistinguishable from a missing one.
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock

    def _get_owned(self, owner_id: str, task_id: str) -> Task:
        task = self.session.exec(
            select(Task).where(Task.id == task_id, Task.user_id == owner_id)
        ).first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def _save(self, task: Task) -> Task:
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def create(self, owner_id: str, title: str, description: Optional[str] = None) -> Task:
        now = self.clock()
        task = Task(
            title=lifecycle.clean_title(title),
            description=lifecycle.clean_description(description),
            status=TaskStatus.PENDING,
            user_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        task = self._save(task)
        logger.info("Created task %s for owner %s", task.id, owner_id)
        return task

    def find_by_id(self, owner_id: str, task_id: str) -> Task:
        return self._get_owned(owner_id, task_id)

    def list_by_owner(self, owner_id: str) -> List[Task]:
        """Owner's tasks, most recently updated first."""
        query = (
            select(Task)
            .where(Task.user_id == owner_id)
            .order_by(Task.updated_at.desc(), Task.created_at.desc())
        )
        return list(self.session.exec(query).all())

    def update(self, owner_id: str, task_id: str, changes: Dict[str, Any]) -> Task:
        task = self._get_owned(owner_id, task_id)
        lifecycle.apply_changes(task, changes, self.clock())
        task = self._save(task)
        logger.debug("Updated task %s fields=%s", task.id, sorted(changes))
        return task

    def change_status(self, owner_id: str, task_id: str, status: Union[TaskStatus, str]) -> Task:
        status = lifecycle.parse_status(status)
        task = self._get_owned(owner_id, task_id)
        previous = task.status
        lifecycle.apply_status(task, status, self.clock())
        task = self._save(task)
        logger.info("Task %s status %s -> %s", task.id, previous.value, status.value)
        return task

    def delete(self, owner_id: str, task_id: str) -> None:
        task = self._get_owned(owner_id, task_id)
        self.session.delete(task)
        self.session.commit()
        logger.info("Deleted task %s for owner %s", task_id, owner_id)
