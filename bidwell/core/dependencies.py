"""
FastAPI Dependencies
"""
from typing import List, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from bidwell.core.config import Settings, get_settings
from bidwell.core.database import get_db
from bidwell.core.security import PasswordHasher, SessionManager, TokenPayload
from bidwell.models import User
from bidwell.services import AuthService
from bidwell.services.errors import NotAuthenticatedError, PermissionDeniedError


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with"""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_session(request: Request) -> Optional[TokenPayload]:
    """Verified session payload (set by SessionGuardMiddleware)"""
    if hasattr(request.state, "session"):
        return request.state.session
    sessions = get_session_manager(request)
    return sessions.verify(request.cookies.get(sessions.cookie_name))


def get_current_user(
    session: Optional[TokenPayload] = Depends(get_session),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Current user or None"""
    return AuthService.resolve(db, session)


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise NotAuthenticatedError()
    return user


def require_admin(user: User = Depends(require_user)) -> User:
    """Admin with an organization"""
    if not user.is_admin or not user.org_id:
        raise PermissionDeniedError("Admin access required")
    return user


def get_verified_auctions(request: Request) -> List[str]:
    """Auction IDs unlocked by the bidder's deposit verification cookie"""
    sessions = get_session_manager(request)
    claims = sessions.read_verification(request.cookies.get(sessions.verification_cookie_name))
    return claims["auctions"] if claims else []


def get_verified_name(request: Request) -> str:
    sessions = get_session_manager(request)
    claims = sessions.read_verification(request.cookies.get(sessions.verification_cookie_name))
    return claims["name"] if claims else ""
