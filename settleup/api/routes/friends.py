"""
Friend (direct ledger) routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from settleup.core.config import settings
from settleup.db.session import get_db
from settleup.schemas.user import User
from settleup.schemas.expense import Expense, DirectExpenseCreate
from settleup.schemas.friend import FriendBalanceResponse, BalanceSummaryResponse
from settleup.services.balance_service import friend_balance, balance_summary, known_friends
from settleup.services.currency_service import Currency, format_amount
from settleup.services.direct_ledger_service import compute_pair_balances, amount_owed
from settleup.services.expense_service import add_direct_expense, list_direct_expenses
from settleup.services.group_service import list_groups
from settleup.api.dependencies import get_current_user

router = APIRouter(prefix="/friends", tags=["friends"])


def describe_balance(friend: User, balance: float, currency: Currency) -> str:
    """Human-readable position against a friend."""
    if balance > settings.SETTLEMENT_EPSILON:
        return f"{friend.name} owes you {format_amount(balance, currency)}"
    if balance < -settings.SETTLEMENT_EPSILON:
        return f"You owe {friend.name} {format_amount(abs(balance), currency)}"
    return "Settled"


def _friend_balance_response(
    me: User,
    friend: User,
    direct_expenses: List[Expense],
    groups: list
) -> FriendBalanceResponse:
    currency = Currency.from_code(settings.DEFAULT_CURRENCY)
    balance = friend_balance(me, friend, direct_expenses, groups, currency)
    pairs = compute_pair_balances(direct_expenses)
    return FriendBalanceResponse(
        friend=friend,
        currency=currency,
        balance=balance,
        direct_balance=amount_owed(pairs, friend.id, me.id),
        description=describe_balance(friend, balance, currency)
    )


@router.post("/expenses", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def create_direct_expense(
    expense_data: DirectExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add an expense shared between you and one friend."""
    try:
        return add_direct_expense(db, current_user, expense_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/expenses", response_model=List[Expense])
async def get_direct_expenses(
    friend_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get your direct expenses, optionally only those with one friend, newest first."""
    expenses = list_direct_expenses(db, current_user.id)
    if friend_id:
        expenses = [e for e in expenses if any(p.id == friend_id for p in e.participants)]
    return sorted(expenses, key=lambda e: e.date, reverse=True)


@router.get("", response_model=List[FriendBalanceResponse])
async def get_friends(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get everyone you share expenses with, and your position against each."""
    direct_expenses = list_direct_expenses(db, current_user.id)
    groups = list_groups(db, current_user.id)
    return [
        _friend_balance_response(current_user, friend, direct_expenses, groups)
        for friend in known_friends(current_user, direct_expenses, groups)
    ]


@router.get("/summary", response_model=BalanceSummaryResponse)
async def get_summary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get what you owe and are owed in total."""
    currency = Currency.from_code(settings.DEFAULT_CURRENCY)
    direct_expenses = list_direct_expenses(db, current_user.id)
    groups = list_groups(db, current_user.id)
    owe, owed = balance_summary(
        current_user,
        known_friends(current_user, direct_expenses, groups),
        direct_expenses,
        groups,
        currency,
        settings.SETTLEMENT_EPSILON
    )
    return BalanceSummaryResponse(currency=currency, owe=owe, owed=owed)


@router.get("/{friend_id}/balance", response_model=FriendBalanceResponse)
async def get_friend_balance(
    friend_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get your position against one friend."""
    direct_expenses = list_direct_expenses(db, current_user.id)
    groups = list_groups(db, current_user.id)
    friend = next(
        (f for f in known_friends(current_user, direct_expenses, groups) if f.id == friend_id),
        None
    )
    if not friend:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Friend not found"
        )
    return _friend_balance_response(current_user, friend, direct_expenses, groups)
