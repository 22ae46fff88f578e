import logging
import re
from typing import Optional

import bcrypt
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .errors import AuthenticationFailed, ConflictError, ValidationError
from .models import User, utcnow

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6

# Compared against when the identifier is unknown, so both failure paths
# spend the same time inside bcrypt.
_DUMMY_HASH = bcrypt.hashpw(b"taskboard-dummy-password", bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode('utf-8')[:72]
    hashed_bytes = hashed_password.encode('utf-8') if isinstance(hashed_password, str) else hashed_password
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt directly."""
    password_bytes = password.encode('utf-8')[:72]  # Truncate to 72 bytes (bcrypt limit)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def _clean_email(email: Optional[str]) -> str:
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError("Email is required")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please provide a valid email")
    return email


def _clean_username(username: Optional[str], email: str) -> str:
    if username is None or not username.strip():
        username = email.split("@")[0]
    username = username.strip().lower()
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    return username


class CredentialStore:
    """Registration, authentication and identity lookup."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, identity_id: str) -> Optional[User]:
        return self.session.get(User, identity_id)

    def get_by_external_id(self, subject: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.external_id == subject)).first()

    def register(
        self,
        name: str,
        email: str,
        password: Optional[str] = None,
        username: Optional[str] = None,
        external_id: Optional[str] = None,
    ) -> User:
        """Create an identity.

        The username falls back to the local part of the email. A password is
        mandatory unless the identity comes from an external provider
        (``external_id``).
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        email = _clean_email(email)
        username = _clean_username(username, email)

        if password is None and not external_id:
            raise ValidationError("Password is required")
        if password is not None and len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

        clauses = [User.email == email, User.username == username]
        if external_id:
            clauses.append(User.external_id == external_id)
        existing = self.session.exec(select(User).where(or_(*clauses))).first()
        if existing:
            raise ConflictError("User already exists with this email, username, or external id")

        now = utcnow()
        user = User(
            name=name,
            email=email,
            username=username,
            hashed_password=get_password_hash(password) if password is not None else None,
            external_id=external_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration.
            self.session.rollback()
            raise ConflictError("User already exists with this email, username, or external id")
        self.session.refresh(user)
        logger.info("Registered identity %s (%s)", user.id, user.username)
        return user

    def authenticate(self, identifier: str, password: str) -> User:
        """Match ``identifier`` against email or username, then check the password.

        Unknown identifiers and wrong passwords raise the same error.
        """
        identifier = (identifier or "").strip().lower()
        user = None
        if identifier:
            user = self.session.exec(
                select(User).where(or_(User.email == identifier, User.username == identifier))
            ).first()

        if user is None or not user.hashed_password:
            verify_password(password or "", _DUMMY_HASH)
            logger.info("Failed login for unknown identifier")
            raise AuthenticationFailed()

        if not verify_password(password or "", user.hashed_password):
            logger.info("Failed login for identity %s", user.id)
            raise AuthenticationFailed()

        return user
