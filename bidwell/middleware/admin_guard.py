"""
Session middleware

Verifies the auth cookie on every request and exposes the payload as
request.state.session. Requests under the protected prefixes without a
valid session are redirected to the login page.
"""
import logging
from typing import Iterable
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class SessionGuardMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, protected_prefixes: Iterable[str] = ("/admin",), login_path: str = "/login"):
        super().__init__(app)
        self.protected_prefixes = tuple(protected_prefixes)
        self.login_path = login_path

    def _is_protected(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next):
        sessions = request.app.state.session_manager
        payload = sessions.verify(request.cookies.get(sessions.cookie_name))
        request.state.session = payload

        if payload is None and self._is_protected(request.url.path):
            logger.info("Unauthenticated request redirected", extra={"path": request.url.path})
            target = f"{self.login_path}?next={quote(request.url.path)}"
            return RedirectResponse(target, status_code=303)

        return await call_next(request)
