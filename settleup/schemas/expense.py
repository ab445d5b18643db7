"""
Pydantic schemas for Expense entity.
"""
import enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from uuid import uuid4
from settleup.schemas.user import User


class ExpenseCategory(str, enum.Enum):
    """Expense category enumeration."""
    FOOD = "food"
    TRAVEL = "travel"
    ACCOMMODATION = "accommodation"
    UTILITIES = "utilities"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Comment(BaseModel):
    """A short remark left by a user on an expense."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    user: User
    text: str
    date: datetime = Field(default_factory=datetime.utcnow)


class Expense(BaseModel):
    """
    A single expense shared equally among its participants.

    ``group_id`` is None for direct (friend-to-friend) expenses.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    amount: float
    paid_by: User
    participants: List[User]
    date: datetime = Field(default_factory=datetime.utcnow)
    group_id: Optional[str] = None
    category: ExpenseCategory = ExpenseCategory.OTHER
    is_recurring: bool = False
    comments: List[Comment] = Field(default_factory=list)


class ExpenseCreate(BaseModel):
    """Schema for group expense creation and full replacement."""
    title: str
    amount: float = Field(ge=0, allow_inf_nan=False)
    paid_by_id: str
    participant_ids: List[str]  # User IDs who share this expense
    date: Optional[datetime] = None
    category: ExpenseCategory = ExpenseCategory.OTHER
    is_recurring: bool = False

    @field_validator('title')
    @classmethod
    def title_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('Expense title must not be empty')
        return v.strip()


class CommentCreate(BaseModel):
    """Schema for adding a comment to an expense."""
    user_id: str
    text: str

    @field_validator('text')
    @classmethod
    def text_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('Comment must not be empty')
        return v.strip()


class DirectExpenseCreate(BaseModel):
    """Schema for a direct expense between the current user and one friend."""
    title: str
    amount: float = Field(ge=0, allow_inf_nan=False)
    friend: User
    paid_by_me: bool = True
    date: Optional[datetime] = None
    category: ExpenseCategory = ExpenseCategory.OTHER

    @field_validator('title')
    @classmethod
    def title_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('Expense title must not be empty')
        return v.strip()
