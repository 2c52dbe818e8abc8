"""
Auth Service - signup, login and session resolution
"""
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bidwell.core import metrics
from bidwell.core.security import PasswordHasher, TokenPayload
from bidwell.models import User, UserRole
from bidwell.services.errors import DuplicateEmailError, InvalidCredentialsError, ValidationError

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def require_fields(message: str, **values) -> None:
    """Raise a field-level ValidationError for blank values"""
    missing = {name: "is required" for name, value in values.items() if not (value or "").strip()}
    if missing:
        raise ValidationError(message, fields=missing)


class AuthService:
    """Service for account and session operations"""

    @staticmethod
    def payload_for(user: User) -> TokenPayload:
        role = user.role.value if isinstance(user.role, UserRole) else user.role
        return TokenPayload(sub=user.id, email=user.email, role=role, org_id=user.org_id)

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.execute(
            select(User).where(func.lower(User.email) == normalize_email(email))
        ).scalar_one_or_none()

    @staticmethod
    def signup(
        db: Session,
        hasher: PasswordHasher,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> User:
        """
        Register a new bidder

        Raises:
            ValidationError: a field is blank
            DuplicateEmailError: email already registered
        """
        require_fields(
            "All fields are required",
            email=email,
            password=password,
            firstName=first_name,
            lastName=last_name,
        )

        email = normalize_email(email)
        if AuthService.find_by_email(db, email) is not None:
            metrics.auth_attempts_total.labels(action="signup", outcome="duplicate").inc()
            raise DuplicateEmailError()

        user = User(
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            password_hash=hasher.hash(password),
            role=UserRole.BIDDER,
            org_id=None,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            db.rollback()
            metrics.auth_attempts_total.labels(action="signup", outcome="duplicate").inc()
            raise DuplicateEmailError()

        metrics.auth_attempts_total.labels(action="signup", outcome="success").inc()
        logger.info("User signed up", extra={"user_id": user.id})
        return user

    @staticmethod
    def login(db: Session, hasher: PasswordHasher, email: str, password: str) -> User:
        """
        Authenticate by email and password

        Unknown email and wrong password give the same error.
        """
        require_fields("Email and password are required", email=email, password=password)

        user = AuthService.find_by_email(db, email)
        if user is None or not hasher.verify(password, user.password_hash):
            metrics.auth_attempts_total.labels(action="login", outcome="failure").inc()
            logger.warning("Login failed")
            raise InvalidCredentialsError()

        metrics.auth_attempts_total.labels(action="login", outcome="success").inc()
        logger.info("User logged in", extra={"user_id": user.id, "org_id": user.org_id})
        return user

    @staticmethod
    def resolve(db: Session, payload: Optional[TokenPayload]) -> Optional[User]:
        """User behind a verified session payload, None if it no longer exists"""
        if payload is None:
            return None
        return db.get(User, payload.sub)

    @staticmethod
    def create_admin(
        db: Session,
        hasher: PasswordHasher,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        org_id: str,
    ) -> User:
        """Admin accounts are provisioned out of band (seed script)"""
        user = User(
            email=normalize_email(email),
            first_name=first_name,
            last_name=last_name,
            password_hash=hasher.hash(password),
            role=UserRole.ADMIN,
            org_id=org_id,
        )
        db.add(user)
        db.commit()
        return user
