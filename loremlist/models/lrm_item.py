"""LrmItem ORM - persists an owned item that may sit on many lists.

Invariants:
    - Same name/description constraints as LrmListModel
    - Quantity and suppression are per-list and live on LrmListItemModel, not here
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from loremlist.core.domain_types import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from loremlist.db.base import Base


class LrmItemModel(Base):
    __tablename__ = "lrm_item"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=True,
    )
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

    list_items: Mapped[list["LrmListItemModel"]] = relationship(
        "LrmListItemModel", back_populates="lrm_item", passive_deletes=True,
    )
