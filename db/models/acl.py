from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.models.base import Base


class AclRole(Base):
    __tablename__ = "acl_roles"

    role_id: Mapped[str] = mapped_column(
        String(length=6), primary_key=True, unique=True
    )
    role_name: Mapped[str] = mapped_column(
        String(length=100), nullable=False, unique=True
    )
    description: Mapped[Optional[str]] = mapped_column(Text, default=None)
    # Role paths and privilege strings, as persisted by the role editor
    privileges: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    users: Mapped[list["AdminUser"]] = relationship(back_populates="acl_role")


class AdminUser(Base):
    __tablename__ = "admin_users"

    user_id: Mapped[str] = mapped_column(
        String(6), primary_key=True, unique=True
    )
    acl_role_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("acl_roles.role_id", ondelete="SET NULL"), nullable=True
    )
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Admins bypass privilege checks
    admin: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    acl_role: Mapped[Optional["AclRole"]] = relationship(back_populates="users")
