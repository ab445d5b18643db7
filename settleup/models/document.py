"""
Ledger document model backing the document store adapter.
"""
from sqlalchemy import Column, String, JSON, UniqueConstraint
from settleup.db.base import BaseModel


class LedgerDocument(BaseModel):
    """A JSON document addressed by collection path and document id."""
    __tablename__ = "ledger_documents"

    collection = Column(String(200), nullable=False, index=True)  # e.g. "groups" or "direct_expenses"
    document_id = Column(String(64), nullable=False, index=True)
    data = Column(JSON, nullable=False)

    # One document per id within a collection
    __table_args__ = (
        UniqueConstraint('collection', 'document_id', name='uq_collection_document'),
    )
