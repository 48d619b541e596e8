from sqlalchemy import Boolean, Column, DateTime, Integer, String, UniqueConstraint
import datetime

from .database import Base

DEFAULT_PROFILE = "default"


class DirectoryUser(Base):
    __tablename__ = "directory_users"
    __table_args__ = (
        UniqueConstraint("username_key", "context", "profile", name="uq_directory_user_scope"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), nullable=False)
    # Lower-cased username used for lookups.
    username_key = Column(String(255), nullable=False, index=True)
    context = Column(String(255), nullable=False, default="")
    profile = Column(String(100), nullable=False, default=DEFAULT_PROFILE)
    display_name = Column(String(255), nullable=True)
    password_hash = Column(String(200), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.datetime.now(datetime.timezone.utc))
    last_login_at = Column(DateTime, nullable=True)
