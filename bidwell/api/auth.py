"""
Auth API Routes

Handles:
- Login / signup (sets the session cookie)
- Logout
- Current user
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bidwell.core.database import get_db
from bidwell.core.dependencies import get_password_hasher, get_session_manager, require_user
from bidwell.core.security import PasswordHasher, SessionManager
from bidwell.middleware.rate_limiter import AUTH_LIMIT, limiter
from bidwell.models import User
from bidwell.schemas import LoginRequest, SignupRequest
from bidwell.services import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
@limiter.limit(AUTH_LIMIT)
def login(
    request: Request,
    body: LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Authenticate and set the session cookie"""
    user = AuthService.login(db, hasher, body.email, body.password)

    response = JSONResponse({"success": True, "user": user.to_dict()})
    sessions.set_cookie(response, AuthService.payload_for(user))
    return response


@router.post("/signup")
@limiter.limit(AUTH_LIMIT)
def signup(
    request: Request,
    body: SignupRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Register a bidder and set the session cookie"""
    user = AuthService.signup(
        db,
        hasher,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )

    response = JSONResponse({"success": True, "user": user.to_dict()}, status_code=201)
    sessions.set_cookie(response, AuthService.payload_for(user))
    return response


@router.post("/logout")
def logout(sessions: SessionManager = Depends(get_session_manager)):
    response = JSONResponse({"success": True})
    sessions.clear_cookie(response)
    return response


@router.get("/me")
def me(user: User = Depends(require_user)):
    return {"success": True, "user": {**user.to_dict(), "orgId": user.org_id}}
