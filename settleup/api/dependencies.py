"""
Shared route dependencies.
"""
from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from settleup.db.session import get_db
from settleup.schemas.user import User
from settleup.services.user_service import get_user


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the calling user from the X-User-Id header."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required"
        )

    user = get_user(db, x_user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user"
        )
    return user
