"""Session tokens and request principals.

A request carries at most one bearer token. It is either a locally issued
session token (claims ``userId``, ``email``, ``username``) or, when an
external provider secret is configured, a provider token identified by its
``sub`` claim. Whatever it is, it resolves to one of the principal types
below and the core never looks at the token again.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from fastapi import Request
from jose import JWTError, jwt

from .config import Settings
from .models import User

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Unauthenticated:
    pass


@dataclass(frozen=True)
class AuthenticatedAs:
    """Holder of a valid local session token."""
    identity_id: str
    email: Optional[str] = None
    username: Optional[str] = None


@dataclass(frozen=True)
class ExternalSubject:
    """Verified subject of an external auth provider, plus its profile claims."""
    subject: str
    email: Optional[str] = None
    name: Optional[str] = None
    nickname: Optional[str] = None


Principal = Union[Unauthenticated, AuthenticatedAs, ExternalSubject]

UNAUTHENTICATED = Unauthenticated()


def create_access_token(user: User, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT session token for ``user``."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {
        "userId": str(user.id),
        "email": user.email,
        "username": user.username,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return request.cookies.get("token")


def _decode_session_token(token: str, settings: Settings) -> Optional[AuthenticatedAs]:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
    identity_id = payload.get("userId")
    if not identity_id:
        return None
    return AuthenticatedAs(
        identity_id=str(identity_id),
        email=payload.get("email"),
        username=payload.get("username"),
    )


def _decode_external_token(token: str, settings: Settings) -> Optional[ExternalSubject]:
    if not settings.external_auth_secret:
        return None
    options = {} if settings.external_auth_audience else {"verify_aud": False}
    try:
        payload = jwt.decode(
            token,
            settings.external_auth_secret,
            algorithms=[ALGORITHM],
            audience=settings.external_auth_audience,
            options=options,
        )
    except JWTError:
        return None
    subject = payload.get("sub")
    if not subject:
        return None
    return ExternalSubject(
        subject=str(subject),
        email=payload.get("email"),
        name=payload.get("name"),
        nickname=payload.get("nickname"),
    )


def resolve_principal(token: Optional[str], settings: Settings) -> Principal:
    """Turn a raw bearer token into a principal. Bad or expired tokens are anonymous."""
    if not token:
        return UNAUTHENTICATED
    return (
        _decode_session_token(token, settings)
        or _decode_external_token(token, settings)
        or UNAUTHENTICATED
    )
