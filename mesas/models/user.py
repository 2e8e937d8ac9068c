from sqlalchemy import Column, Integer, String, DateTime, Enum, UniqueConstraint
from datetime import datetime
import enum

from mesas.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MEMBER = "member"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("building", "username", name="uq_users_building_username"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    building = Column(String, nullable=False, index=True)
    username = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.MEMBER)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
