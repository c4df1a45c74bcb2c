from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import datetime

from .database import Base


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


# ------------------------------------------------------------
# USER TABLE
# ------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)

    # Address (all optional; veterans in transition may have none)
    address_line1 = Column(String(255), nullable=True)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(2), nullable=True)
    zip_code = Column(String(10), nullable=True)
    is_homeless = Column(Boolean, default=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    saved_resources = relationship("SavedResource", back_populates="user", cascade="all, delete-orphan")


# ------------------------------------------------------------
# SAVED RESOURCE TABLE (user bookmarks with notes)
# ------------------------------------------------------------
class SavedResource(Base):
    __tablename__ = "saved_resources"
    __table_args__ = (UniqueConstraint("user_id", "resource_id", name="uq_saved_user_resource"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    resource_id = Column(String(36), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="saved_resources")
