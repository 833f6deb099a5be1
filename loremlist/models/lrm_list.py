"""LrmList ORM - persists a named, owned collection of items.

Invariants:
    - name non-nullable, at most 64 chars
    - owner non-nullable; every query of the list service filters by it
    - Deleting a list cascades to its lrm_list_item rows (FK ON DELETE CASCADE)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from loremlist.core.domain_types import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from loremlist.db.base import Base


class LrmListModel(Base):
    """List entity - owned by one principal, optionally public."""
    __tablename__ = "lrm_list"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=True,
    )
    public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    owner: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    creator: Mapped[str] = mapped_column(String(255), nullable=False)
    updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updater: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    list_items: Mapped[list["LrmListItemModel"]] = relationship(
        "LrmListItemModel", back_populates="lrm_list", passive_deletes=True,
    )
