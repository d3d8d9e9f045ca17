"""
User model for authentication and authorization
"""
import uuid
import enum
from sqlalchemy import Boolean, Column, String, DateTime, Enum, Uuid

from realty_crm.database import Base, utcnow


class UserRole(str, enum.Enum):
    """Account role, highest privilege first"""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    AGENT = "agent"
    USER = "user"


ADMIN_ROLES = (UserRole.SUPER_ADMIN, UserRole.ADMIN)


class AuthProvider(str, enum.Enum):
    """How the account signs in"""
    GOOGLE = "google"
    EMAIL = "email"
    JWT = "jwt"


class User(Base):
    """User model"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # Firebase-provisioned end users never set a password
    hashed_password = Column(String(255), nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER, index=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)

    # Firebase identity (regular users)
    firebase_uid = Column(String(128), unique=True, nullable=True)
    photo_url = Column(String(1000), nullable=True)
    auth_provider = Column(Enum(AuthProvider), nullable=False, default=AuthProvider.EMAIL)

    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def requires_password(self) -> bool:
        """Only end users may sign in without a password"""
        return self.role != UserRole.USER

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value if self.role else None})>"
