from fastapi import APIRouter, Depends, Response, status

from ..access import TaskAccess
from ..config import Settings
from ..deps import get_app_settings, get_principal, get_task_access
from ..models import User
from ..schemas.user import AuthResponse, User as UserSchema, UserCreate, UserLogin
from ..security import ExternalSubject, Principal, create_access_token

router = APIRouter()


def _issue_session(user: User, response: Response, settings: Settings) -> dict:
    access_token = create_access_token(user, settings)
    response.set_cookie(
        key="token",
        value=access_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user,
    }


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    response: Response,
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
    settings: Settings = Depends(get_app_settings),
):
    """Create a new identity.

    When the request carries an external provider token, the new identity is
    linked to that subject and the password becomes optional.
    """
    external_id = None
    username = payload.username
    if isinstance(principal, ExternalSubject):
        external_id = principal.subject
        username = username or principal.nickname

    user = access.register_identity(
        payload.name,
        payload.email,
        password=payload.password,
        username=username,
        external_id=external_id,
    )
    return _issue_session(user, response, settings)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: UserLogin,
    response: Response,
    access: TaskAccess = Depends(get_task_access),
    settings: Settings = Depends(get_app_settings),
):
    """Sign in with email or username and get a JWT session token."""
    user = access.authenticate(payload.identifier, payload.password)
    return _issue_session(user, response, settings)


@router.post("/signout")
def signout(response: Response):
    """Sign out and clear session cookie."""
    response.delete_cookie(key="token")
    return {"success": True}


@router.get("/me", response_model=UserSchema)
def read_current_identity(
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
):
    """Get current identity information."""
    return access.current_identity(principal)
