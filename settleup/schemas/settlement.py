"""
Pydantic schemas for balances and settlement.
"""
from pydantic import BaseModel, Field
from typing import Annotated, Dict, List, Literal
from settleup.core.config import settings
from settleup.services.currency_service import Currency


class TransferResponse(BaseModel):
    """Schema for a single transfer in settlement."""
    payer_id: str
    payer_name: str
    payee_id: str
    payee_name: str
    amount: float  # In the group's currency


class BalanceEntry(BaseModel):
    """Schema for one member's net balance."""
    user_id: str
    name: str
    balance: float  # positive = owed, negative = owes


class BalancesResponse(BaseModel):
    """Schema for group balances response."""
    group_id: str
    currency: Currency
    balances: List[BalanceEntry]


class SettlementSummary(BaseModel):
    """Schema for settlement summary."""
    group_id: str
    strategy: str
    currency: Currency
    net_balances: List[BalanceEntry]
    transfers: List[TransferResponse]
    total_expenses: float  # In the group's currency
    participant_count: int
    summary: str


class SettlementComputeRequest(BaseModel):
    """Schema for stateless settlement of arbitrary balances."""
    balances: Dict[str, Annotated[float, Field(allow_inf_nan=False)]]  # user id -> net balance
    strategy: Literal["standard", "simplified"] = "standard"
    epsilon: float = Field(default=settings.SETTLEMENT_EPSILON, gt=0, allow_inf_nan=False)


class Transfer(BaseModel):
    """Schema for a transfer identified by user ids only."""
    payer_id: str
    payee_id: str
    amount: float


class SettlementComputeResponse(BaseModel):
    """Schema for stateless settlement response."""
    strategy: str
    transfers: List[Transfer]
