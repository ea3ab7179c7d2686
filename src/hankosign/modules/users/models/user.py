from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean, JSON
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from datetime import datetime
from hankosign.database import Base

class UserRole(PyEnum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"

class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    name_kana = Column(String(100), nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)

    # Company fields
    company_name = Column(String(200), nullable=True)
    corporate_number = Column(String(13), nullable=True)
    department = Column(String(100), nullable=True)
    position = Column(String(100), nullable=True)

    preferences = Column(JSON, nullable=True)

    # Only the SHA-256 of the emailed token is stored
    password_reset_token_hash = Column(String(64), nullable=True, index=True)
    password_reset_expires = Column(DateTime, nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hankos = relationship("Hanko", back_populates="user", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="created_by")

    notifications = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan"
    )
