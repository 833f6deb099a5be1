"""ORM Models - SQLAlchemy declarative models for lists, items and their associations.

Invariants:
    - All models inherit from Base (db/base.py)
    - ORM models never cross into core/; the store adapters convert them to entities

Design Decisions:
    - One file per table for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from loremlist.models.lrm_list import LrmListModel  # noqa: F401
from loremlist.models.lrm_item import LrmItemModel  # noqa: F401
from loremlist.models.lrm_list_item import LrmListItemModel  # noqa: F401
