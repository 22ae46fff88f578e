# tests/test_lifecycle.py

from __future__ import annotations

from datetime import datetime

import pytest

from taskboard import lifecycle
from taskboard.errors import ValidationError
from taskboard.models import Task, TaskStatus


def _task(**kwargs) -> Task:
    defaults = dict(title="Write report", user_id="owner-1", updated_at=datetime(2024, 1, 1))
    defaults.update(kwargs)
    return Task(**defaults)


@pytest.mark.parametrize("value", ["PENDING", "IN_PROGRESS", "DONE", "ARCHIVED"])
def test_parse_status_accepts_every_label(value: str) -> None:
    assert lifecycle.parse_status(value) is TaskStatus(value)


@pytest.mark.parametrize("value", ["pending", "in-progress", "CLOSED", "", None, 3])
def test_parse_status_rejects_unknown_values(value) -> None:
    with pytest.raises(ValidationError, match="Valid status is required"):
        lifecycle.parse_status(value)


def test_next_status_follows_board_cycle() -> None:
    seen = [TaskStatus.PENDING]
    for _ in range(4):
        seen.append(lifecycle.next_status(seen[-1]))

    assert seen == [
        TaskStatus.PENDING,
        TaskStatus.IN_PROGRESS,
        TaskStatus.DONE,
        TaskStatus.ARCHIVED,
        TaskStatus.PENDING,
    ]


def test_clean_title_trims_and_enforces_limits() -> None:
    assert lifecycle.clean_title("  Buy milk  ") == "Buy milk"
    assert lifecycle.clean_title("x" * 200) == "x" * 200

    for bad in ("", "   ", None):
        with pytest.raises(ValidationError, match="Title is required"):
            lifecycle.clean_title(bad)

    with pytest.raises(ValidationError, match="200"):
        lifecycle.clean_title("x" * 201)


def test_clean_description_blank_becomes_none() -> None:
    assert lifecycle.clean_description(None) is None
    assert lifecycle.clean_description("   ") is None
    assert lifecycle.clean_description("  two liters ") == "two liters"

    with pytest.raises(ValidationError, match="1000"):
        lifecycle.clean_description("d" * 1001)


def test_apply_changes_only_touches_given_fields() -> None:
    task = _task(description="keep me")
    now = datetime(2024, 6, 1)

    lifecycle.apply_changes(task, {"title": "  New title "}, now)

    assert task.title == "New title"
    assert task.description == "keep me"
    assert task.status == TaskStatus.PENDING
    assert task.updated_at == now


def test_apply_changes_with_nothing_still_refreshes_timestamp() -> None:
    task = _task()
    now = datetime(2024, 6, 2)

    lifecycle.apply_changes(task, {}, now)

    assert task.title == "Write report"
    assert task.updated_at == now


def test_apply_changes_validates_status_with_the_same_rule() -> None:
    task = _task()

    lifecycle.apply_changes(task, {"status": "DONE"}, datetime(2024, 6, 3))
    assert task.status == TaskStatus.DONE

    with pytest.raises(ValidationError):
        lifecycle.apply_changes(task, {"status": "FINISHED"}, datetime(2024, 6, 4))
    assert task.status == TaskStatus.DONE


def test_apply_changes_rejects_owner_and_id_edits_without_mutating() -> None:
    task = _task(id="task-1")
    before = task.updated_at

    with pytest.raises(ValidationError, match="user_id"):
        lifecycle.apply_changes(task, {"title": "Other", "user_id": "intruder"}, datetime(2024, 6, 5))
    with pytest.raises(ValidationError, match="id"):
        lifecycle.apply_changes(task, {"id": "task-2"}, datetime(2024, 6, 5))

    assert task.id == "task-1"
    assert task.user_id == "owner-1"
    assert task.title == "Write report"
    assert task.updated_at == before


def test_apply_status_allows_any_target_from_any_state() -> None:
    for current in TaskStatus:
        for target in TaskStatus:
            task = _task(status=current)
            lifecycle.apply_status(task, target, datetime(2024, 7, 1))
            assert task.status is target
