"""
Pydantic schemas for friend balances.
"""
from pydantic import BaseModel
from settleup.schemas.user import User
from settleup.services.currency_service import Currency


class FriendBalanceResponse(BaseModel):
    """Schema for the current user's position against one friend."""
    friend: User
    currency: Currency
    balance: float  # Across direct and group expenses; positive = friend owes you
    direct_balance: float  # Direct expenses only
    description: str


class BalanceSummaryResponse(BaseModel):
    """Schema for the current user's totals across all friends."""
    currency: Currency
    owe: float  # Non-positive total of what you owe
    owed: float  # Total of what you are owed
