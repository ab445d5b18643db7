"""
Pydantic schemas for Adjustment entity.
"""
from pydantic import BaseModel, Field
from datetime import datetime
from uuid import uuid4
from settleup.schemas.user import User


class Adjustment(BaseModel):
    """
    A manual transfer between two group members.

    A positive amount means ``from_user`` paid ``to_user``. A negative
    amount records forgiveness of part of what ``from_user`` is owed.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    from_user: User
    to_user: User
    amount: float
    date: datetime = Field(default_factory=datetime.utcnow)


class AdjustmentCreate(BaseModel):
    """Schema for recording a payment or forgiveness."""
    from_user_id: str
    to_user_id: str
    amount: float = Field(allow_inf_nan=False)
