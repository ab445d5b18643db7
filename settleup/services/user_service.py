"""
User service for participant profiles.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session
from settleup.schemas.user import User
from settleup.services.document_store import get_document, set_document
from settleup.services.serializers import user_to_document, user_from_document

logger = logging.getLogger(__name__)

USERS = "users"


def register_user(db: Session, user: User) -> User:
    """Create or replace a user profile."""
    set_document(db, USERS, user.id, user_to_document(user))
    logger.info(f"Registered user {user.id}")
    return user


def get_user(db: Session, user_id: str) -> Optional[User]:
    data = get_document(db, USERS, user_id)
    return user_from_document(data) if data else None
