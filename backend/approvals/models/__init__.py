"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - PurchaseRequest is the aggregate root; items are scoped by request_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from approvals.models.user import User  # noqa: F401
from approvals.models.purchase_request import PurchaseRequest  # noqa: F401
from approvals.models.purchase_item import PurchaseItem  # noqa: F401
