"""
Balance and settlement routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from settleup.core.config import settings
from settleup.db.session import get_db
from settleup.schemas.adjustment import Adjustment
from settleup.schemas.settlement import (
    BalancesResponse, BalanceEntry, SettlementSummary,
    SettlementComputeRequest, SettlementComputeResponse, Transfer
)
from settleup.services.balance_service import group_balances
from settleup.services.settlement_service import SettlementStrategy, calculate_settlement, compute_settlement
from settleup.services.expense_service import settle_group
from settleup.api.routes.groups import get_group_or_404

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.post("/compute", response_model=SettlementComputeResponse)
async def compute(request: SettlementComputeRequest):
    """Settle an arbitrary balance map without touching any ledger."""
    transfers = compute_settlement(request.balances, SettlementStrategy(request.strategy), request.epsilon)
    return SettlementComputeResponse(
        strategy=request.strategy,
        transfers=[Transfer(payer_id=t.payer_id, payee_id=t.payee_id, amount=t.amount) for t in transfers]
    )


@router.get("/{group_id}/balances", response_model=BalancesResponse)
async def get_balances(
    group_id: str,
    db: Session = Depends(get_db)
):
    """Get every member's net balance, recomputed from the ledger."""
    group = get_group_or_404(group_id, db)
    names = {user.id: user.name for user in group.members}
    return BalancesResponse(
        group_id=group.id,
        currency=group.currency,
        balances=[
            BalanceEntry(user_id=uid, name=names.get(uid, ""), balance=bal)
            for uid, bal in group_balances(group).items()
        ]
    )


@router.get("/{group_id}", response_model=SettlementSummary)
async def get_settlement(
    group_id: str,
    strategy: Optional[SettlementStrategy] = None,
    db: Session = Depends(get_db)
):
    """
    Get the transfers that would settle the group.
    The group's simplify-debts flag picks the strategy unless one is given.
    """
    group = get_group_or_404(group_id, db)
    return calculate_settlement(group, strategy, settings.SETTLEMENT_EPSILON)


@router.post("/{group_id}/settle", response_model=List[Adjustment])
async def settle(
    group_id: str,
    strategy: Optional[SettlementStrategy] = None,
    db: Session = Depends(get_db)
):
    """Accept the settlement and record it as adjustments."""
    get_group_or_404(group_id, db)
    return settle_group(db, group_id, strategy, settings.SETTLEMENT_EPSILON)
