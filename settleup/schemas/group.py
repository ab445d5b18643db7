"""
Pydantic schemas for Group entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from uuid import uuid4
from settleup.schemas.user import User
from settleup.schemas.expense import Expense
from settleup.schemas.adjustment import Adjustment
from settleup.services.currency_service import Currency


class Activity(BaseModel):
    """An entry in a group's activity feed."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    text: str
    date: datetime = Field(default_factory=datetime.utcnow)


class Group(BaseModel):
    """Group ledger: members, expenses, adjustments and activity feed."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    members: List[User] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)
    adjustments: List[Adjustment] = Field(default_factory=list)
    activity: List[Activity] = Field(default_factory=list)
    currency: Currency = Currency.USD
    simplify_debts: bool = False
    is_public: bool = False
    budget: Optional[float] = None

    def member(self, user_id: str) -> Optional[User]:
        """Look up a member by id."""
        for user in self.members:
            if user.id == user_id:
                return user
        return None


class GroupCreate(BaseModel):
    """Schema for group creation."""
    name: str
    members: List[User] = []
    currency: Optional[Currency] = None  # Defaults to DEFAULT_CURRENCY setting
    simplify_debts: bool = False
    is_public: bool = False
    budget: Optional[float] = Field(default=None, ge=0)

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('Group name must not be empty')
        return v.strip()


class GroupUpdate(BaseModel):
    """Schema for group update."""
    name: Optional[str] = None
    simplify_debts: Optional[bool] = None
    currency: Optional[Currency] = None
