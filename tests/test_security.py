# tests/test_security.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from taskboard.config import Settings
from taskboard.models import User
from taskboard.security import (
    ALGORITHM,
    AuthenticatedAs,
    ExternalSubject,
    Unauthenticated,
    create_access_token,
    resolve_principal,
)

from .conftest import EXTERNAL_AUDIENCE, EXTERNAL_SECRET


def _user() -> User:
    return User(id="user-1", name="Ann", email="ann@x.com", username="ann")


def test_session_token_carries_identity_claims(settings: Settings) -> None:
    token = create_access_token(_user(), settings)

    payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    assert payload["userId"] == "user-1"
    assert payload["email"] == "ann@x.com"
    assert payload["username"] == "ann"

    assert resolve_principal(token, settings) == AuthenticatedAs("user-1", "ann@x.com", "ann")


def test_session_token_expires_after_seven_days(settings: Settings) -> None:
    token = create_access_token(_user(), settings)

    payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    expected = datetime.now(timezone.utc) + timedelta(days=7)
    assert abs((expires - expected).total_seconds()) < 60


def test_missing_expired_or_forged_tokens_are_unauthenticated(settings: Settings) -> None:
    expired = create_access_token(_user(), settings, expires_delta=timedelta(seconds=-10))
    forged = jwt.encode({"userId": "user-1"}, "someone-elses-secret", algorithm=ALGORITHM)

    for token in (None, "", "garbage", expired, forged):
        assert isinstance(resolve_principal(token, settings), Unauthenticated)


def test_external_token_resolves_to_subject(settings: Settings) -> None:
    token = jwt.encode(
        {"sub": "provider|7", "email": "ext@x.com", "nickname": "exty", "aud": EXTERNAL_AUDIENCE},
        EXTERNAL_SECRET,
        algorithm=ALGORITHM,
    )

    principal = resolve_principal(token, settings)

    assert principal == ExternalSubject(subject="provider|7", email="ext@x.com", nickname="exty")


def test_external_token_with_wrong_audience_is_rejected(settings: Settings) -> None:
    token = jwt.encode({"sub": "provider|7", "aud": "someone-else"}, EXTERNAL_SECRET, algorithm=ALGORITHM)

    assert isinstance(resolve_principal(token, settings), Unauthenticated)


def test_external_tokens_ignored_without_provider_secret() -> None:
    settings = Settings(secret_key="test-secret")
    token = jwt.encode({"sub": "provider|7"}, EXTERNAL_SECRET, algorithm=ALGORITHM)

    assert isinstance(resolve_principal(token, settings), Unauthenticated)
