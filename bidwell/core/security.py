"""
Password hashing and signed session tokens.

SessionManager is built from Settings when the app is created and kept on
app.state; nothing here reads configuration at import time.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

import jwt
from passlib.context import CryptContext
from starlette.responses import Response

from bidwell.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPayload:
    """Claims carried by the auth cookie"""
    sub: str
    email: str
    role: str
    org_id: Optional[str] = None

    def to_claims(self) -> Dict[str, Any]:
        return {"sub": self.sub, "email": self.email, "role": self.role, "orgId": self.org_id}

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "TokenPayload":
        return cls(
            sub=claims["sub"],
            email=claims["email"],
            role=claims["role"],
            org_id=claims.get("orgId"),
        )


class PasswordHasher:
    """bcrypt via passlib"""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        try:
            return self._context.verify(plain, hashed)
        except ValueError:
            # Malformed stored hash
            logger.warning("Unreadable password hash")
            return False


class SessionManager:
    """Issues and verifies the signed session cookie"""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        cookie_name: str = "auth-token",
        verification_cookie_name: str = "bidder-verification",
        secure: bool = False,
    ):
        if not secret:
            raise ValueError("Session secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self.cookie_name = cookie_name
        self.verification_cookie_name = verification_cookie_name
        self.secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionManager":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            ttl=timedelta(days=settings.SESSION_TTL_DAYS),
            cookie_name=settings.COOKIE_NAME,
            verification_cookie_name=settings.VERIFICATION_COOKIE_NAME,
            secure=settings.COOKIE_SECURE,
        )

    @property
    def max_age(self) -> int:
        return int(self.ttl.total_seconds())

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------
    def _encode(self, claims: Dict[str, Any], now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        body = dict(claims)
        body["iat"] = now
        body["exp"] = now + self.ttl
        return jwt.encode(body, self._secret, algorithm=self.algorithm)

    def _decode(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Session token expired")
        except jwt.InvalidTokenError:
            logger.info("Session token rejected")
        return None

    def issue(self, payload: TokenPayload, now: Optional[datetime] = None) -> str:
        return self._encode(payload.to_claims(), now)

    def verify(self, token: Optional[str]) -> Optional[TokenPayload]:
        """Payload of a valid token, None for missing, forged or expired ones"""
        if not token:
            return None
        claims = self._decode(token)
        if claims is None:
            return None
        try:
            return TokenPayload.from_claims(claims)
        except KeyError:
            logger.info("Session token missing claims")
            return None

    def issue_verification(self, name: str, auction_ids: Iterable[str], now: Optional[datetime] = None) -> str:
        return self._encode({"typ": "verification", "name": name, "auctions": sorted(set(auction_ids))}, now)

    def read_verification(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        if not token:
            return None
        claims = self._decode(token)
        if not claims or claims.get("typ") != "verification":
            return None
        return {"name": claims.get("name", ""), "auctions": list(claims.get("auctions", []))}

    # ------------------------------------------------------------------
    # Cookies
    # ------------------------------------------------------------------
    def _set(self, response: Response, name: str, value: str) -> None:
        response.set_cookie(
            key=name,
            value=value,
            max_age=self.max_age,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def set_cookie(self, response: Response, payload: TokenPayload) -> str:
        token = self.issue(payload)
        self._set(response, self.cookie_name, token)
        return token

    def clear_cookie(self, response: Response) -> None:
        response.delete_cookie(self.cookie_name, path="/")
        response.delete_cookie(self.verification_cookie_name, path="/")

    def set_verification_cookie(self, response: Response, name: str, auction_ids: Iterable[str]) -> str:
        token = self.issue_verification(name, auction_ids)
        self._set(response, self.verification_cookie_name, token)
        return token
