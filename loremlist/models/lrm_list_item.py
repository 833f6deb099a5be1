"""LrmListItem ORM - the association between one list and one item.

Invariants:
    - (list_id, item_id) unique: uq_lrm_list_item_list_id_item_id
    - Both FKs ON DELETE CASCADE: removing either side removes the association
    - quantity >= 0, defaults to 0; is_suppressed defaults to False

Design Decisions:
    - Surrogate UUID id: bulk creation reads rows back by id to report names and owners
    - passive_deletes on both parents: the database cascades, the ORM never loads
      children just to delete them
"""

import uuid

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from loremlist.db.base import Base


class LrmListItemModel(Base):
    __tablename__ = "lrm_list_item"
    __table_args__ = (
        UniqueConstraint(
            "list_id", "item_id", name="uq_lrm_list_item_list_id_item_id",
        ),
        CheckConstraint("quantity >= 0", name="ck_lrm_list_item_quantity"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    list_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("lrm_list.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("lrm_item.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_suppressed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )

    # Relationships
    lrm_list: Mapped["LrmListModel"] = relationship(
        "LrmListModel", back_populates="list_items",
    )
    lrm_item: Mapped["LrmItemModel"] = relationship(
        "LrmItemModel", back_populates="list_items",
    )
