"""
Restaurants API - Restaurant SQLAlchemy Model
==============================================

What:  ORM model for the `restaurants` collection.
How:   Scalar fields are plain columns. The structured sub-documents
       (`address`, `grades`) are stored as JSON and never inspected by
       this service, so their shape is whatever clients send.
Who:   Used by RestaurantService for CRUD operations and by Alembic.

Identifier:
    A 32-character hex string generated from uuid4 when the row is inserted.
    It is assigned by the store layer, never taken from a create payload,
    and never changed afterwards.
"""

import uuid
from typing import Any, List, Optional

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from restaurants_api.database import Base

# JSONB on PostgreSQL, generic JSON (TEXT-backed) elsewhere
DocumentType = JSON().with_variant(JSONB(), "postgresql")


def new_restaurant_id() -> str:
    return uuid.uuid4().hex


class Restaurant(Base):
    """A stored restaurant document."""

    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_restaurant_id,
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    borough: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    cuisine: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # What: Structured address, e.g. {"building": "...", "street": "...", "zipcode": "..."}
    address: Mapped[Optional[Any]] = mapped_column(DocumentType, nullable=True)

    # What: Ordered inspection grades, e.g. [{"date": ..., "grade": "A", "score": 11}]
    grades: Mapped[List[Any]] = mapped_column(DocumentType, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}', borough='{self.borough}')>"
