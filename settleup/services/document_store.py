"""
Document store adapter: per-document CRUD keyed by collection and id.
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from settleup.models.document import LedgerDocument

logger = logging.getLogger(__name__)


def _find(db: Session, collection: str, document_id: str) -> Optional[LedgerDocument]:
    return db.query(LedgerDocument).filter(
        LedgerDocument.collection == collection,
        LedgerDocument.document_id == document_id
    ).first()


def get_document(db: Session, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
    """Return the document payload, or None if it does not exist."""
    document = _find(db, collection, document_id)
    return dict(document.data) if document else None


def set_document(db: Session, collection: str, document_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Create or fully replace a document."""
    document = _find(db, collection, document_id)
    if document:
        document.data = data
    else:
        document = LedgerDocument(collection=collection, document_id=document_id, data=data)
        db.add(document)

    db.commit()
    logger.debug(f"Stored document {collection}/{document_id}")
    return data


def update_fields(db: Session, collection: str, document_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update selected top-level fields of an existing document.
    Raises LookupError if the document does not exist.
    """
    document = _find(db, collection, document_id)
    if not document:
        raise LookupError(f"Document {collection}/{document_id} not found")

    # Assign a new dict so the JSON column is flagged as modified
    data = dict(document.data)
    data.update(fields)
    document.data = data

    db.commit()
    logger.debug(f"Updated fields {sorted(fields)} of {collection}/{document_id}")
    return data


def delete_document(db: Session, collection: str, document_id: str) -> bool:
    """Delete a document. Returns False if it did not exist."""
    document = _find(db, collection, document_id)
    if not document:
        return False

    db.delete(document)
    db.commit()
    logger.debug(f"Deleted document {collection}/{document_id}")
    return True


def list_documents(db: Session, collection: str) -> List[Dict[str, Any]]:
    """All documents of a collection in insertion order."""
    documents = db.query(LedgerDocument).filter(
        LedgerDocument.collection == collection
    ).order_by(LedgerDocument.id).all()
    return [dict(document.data) for document in documents]
