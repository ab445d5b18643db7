"""Models package - Import all models for SQLAlchemy registration."""
from settleup.models.document import LedgerDocument

__all__ = [
    "LedgerDocument",
]
