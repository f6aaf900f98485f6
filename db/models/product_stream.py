from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.models.base import Base


class ProductStream(Base):
    """A dynamic product group defined by a tree of filters."""

    __tablename__ = "product_streams"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, default=None)
    invalid: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    filters: Mapped[list["ProductStreamFilter"]] = relationship(
        back_populates="product_stream",
        cascade="all, delete-orphan",
        order_by="ProductStreamFilter.position",
    )


class ProductStreamFilter(Base):
    __tablename__ = "product_stream_filters"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    product_stream_id: Mapped[str] = mapped_column(
        ForeignKey("product_streams.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("product_stream_filters.id", ondelete="CASCADE"), nullable=True
    )

    type: Mapped[str] = mapped_column(String(255), nullable=False)
    field: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    operator: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    value: Mapped[Optional[str]] = mapped_column(Text, default=None)
    parameters: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, default=None)
    position: Mapped[int] = mapped_column(Integer, default=0)
    custom_fields: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    product_stream: Mapped["ProductStream"] = relationship(back_populates="filters")
    parent: Mapped[Optional["ProductStreamFilter"]] = relationship(
        back_populates="queries", remote_side="ProductStreamFilter.id"
    )
    queries: Mapped[list["ProductStreamFilter"]] = relationship(
        back_populates="parent",
        order_by="ProductStreamFilter.position",
    )
