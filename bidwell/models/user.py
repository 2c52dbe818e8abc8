"""
User model
"""
import enum

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, String
from sqlalchemy.orm import relationship

from bidwell.core.database import Base
from bidwell.core.timeutils import utcnow
from bidwell.models.base import enum_values, new_id


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    BIDDER = "bidder"


class User(Base):
    """Admins belong to one organization; bidders have none"""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True, default=new_id)
    email = Column(String(320), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(UserRole, native_enum=False, length=16, values_callable=enum_values),
        default=UserRole.BIDDER,
        nullable=False,
    )
    org_id = Column(String(64), ForeignKey("organizations.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    organization = relationship("Organization", back_populates="members")
    bids = relationship("Bid", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id!r}, email={self.email!r}, role={self.role})>"

    @property
    def display_name(self) -> str:
        """'Jane D.' style name shown next to bids"""
        initial = f" {self.last_name[0]}." if self.last_name else ""
        return f"{self.first_name}{initial}"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value if isinstance(self.role, UserRole) else self.role,
        }
