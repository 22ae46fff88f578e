"""GraphQL façade over the same access layer the REST routers use.

Field and argument names are camel-cased by strawberry (``userId``,
``changeTaskStatus``, ``emailOrUsername``).
"""

from datetime import datetime
from typing import List, Optional

import strawberry
from fastapi import Depends
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from ..access import TaskAccess
from ..config import Settings
from ..deps import get_app_settings, get_principal, get_task_access
from ..errors import TaskboardError
from ..models import Task as TaskModel, TaskStatus as TaskStatusModel, User as UserModel
from ..security import Principal, create_access_token

TaskStatus = strawberry.enum(TaskStatusModel, name="TaskStatus")


@strawberry.type
class User:
    id: strawberry.ID
    name: str
    email: str
    username: str

    @classmethod
    def from_model(cls, user: UserModel) -> "User":
        return cls(id=strawberry.ID(user.id), name=user.name, email=user.email, username=user.username)


@strawberry.type
class AuthPayload:
    token: str
    user: User


@strawberry.type
class Task:
    id: strawberry.ID
    title: str
    description: Optional[str]
    status: TaskStatus
    user_id: strawberry.ID
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, task: TaskModel) -> "Task":
        return cls(
            id=strawberry.ID(task.id),
            title=task.title,
            description=task.description,
            status=task.status,
            user_id=strawberry.ID(task.user_id),
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


def _call(fn, *args, **kwargs):
    """Run an access-layer call, re-raising domain errors as GraphQL errors."""
    try:
        return fn(*args, **kwargs)
    except TaskboardError as exc:
        raise GraphQLError(exc.message, extensions={"code": exc.code})


def _access(info: Info) -> TaskAccess:
    return info.context["access"]


def _principal(info: Info) -> Principal:
    return info.context["principal"]


def _auth_payload(info: Info, user: UserModel) -> AuthPayload:
    token = create_access_token(user, info.context["settings"])
    return AuthPayload(token=token, user=User.from_model(user))


@strawberry.type
class Query:
    @strawberry.field
    def me(self, info: Info) -> Optional[User]:
        user = _call(_access(info).current_identity, _principal(info))
        return User.from_model(user)

    @strawberry.field
    def tasks(self, info: Info) -> List[Task]:
        tasks = _call(_access(info).list_tasks, _principal(info))
        return [Task.from_model(task) for task in tasks]

    @strawberry.field
    def task(self, info: Info, id: strawberry.ID) -> Optional[Task]:
        task = _call(_access(info).get_task, _principal(info), str(id))
        return Task.from_model(task)


@strawberry.type
class Mutation:
    @strawberry.mutation
    def register_user(
        self,
        info: Info,
        name: str,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> AuthPayload:
        user = _call(_access(info).register_identity, name, email, password=password, username=username)
        return _auth_payload(info, user)

    @strawberry.mutation
    def login_user(self, info: Info, email_or_username: str, password: str) -> AuthPayload:
        user = _call(_access(info).authenticate, email_or_username, password)
        return _auth_payload(info, user)

    @strawberry.mutation
    def create_task(self, info: Info, title: str, description: Optional[str] = None) -> Task:
        task = _call(_access(info).create_task, _principal(info), title, description)
        return Task.from_model(task)

    @strawberry.mutation
    def update_task(
        self,
        info: Info,
        id: strawberry.ID,
        title: Optional[str] = strawberry.UNSET,
        description: Optional[str] = strawberry.UNSET,
    ) -> Task:
        # Arguments left out of the query stay UNSET and are not touched.
        changes = {}
        if title is not strawberry.UNSET:
            changes["title"] = title
        if description is not strawberry.UNSET:
            changes["description"] = description
        task = _call(_access(info).update_task, _principal(info), str(id), changes)
        return Task.from_model(task)

    @strawberry.mutation
    def delete_task(self, info: Info, id: strawberry.ID) -> bool:
        _call(_access(info).delete_task, _principal(info), str(id))
        return True

    @strawberry.mutation
    def change_task_status(self, info: Info, id: strawberry.ID, status: TaskStatus) -> Task:
        task = _call(_access(info).change_task_status, _principal(info), str(id), status)
        return Task.from_model(task)


schema = strawberry.Schema(query=Query, mutation=Mutation)


def get_context(
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    return {"principal": principal, "access": access, "settings": settings}


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_context)
