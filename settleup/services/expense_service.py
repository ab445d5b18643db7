"""
Expense service for expense-related business logic.

Validation of new records happens here, at the ledger boundary. The
balance and settlement engines never see a record rejected by this module.
"""
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from settleup.schemas.user import User
from settleup.schemas.expense import Expense, ExpenseCreate, Comment, CommentCreate, DirectExpenseCreate
from settleup.schemas.adjustment import Adjustment, AdjustmentCreate
from settleup.schemas.group import Group
from settleup.services.balance_service import is_valid_amount, group_balances, EPSILON
from settleup.services.currency_service import format_amount
from settleup.services.direct_ledger_service import is_direct_pair
from settleup.services.document_store import update_fields, set_document, list_documents
from settleup.services.group_service import GROUPS, get_group, log_activity
from settleup.services.serializers import (
    expense_to_document, expense_from_document, adjustment_to_document, activity_to_document
)
from settleup.services.settlement_service import (
    SettlementStrategy, compute_settlement, settlement_strategy_for, transfers_to_adjustments
)

logger = logging.getLogger(__name__)

DIRECT_EXPENSES = "direct_expenses"


def _require_member(group: Group, user_id: str) -> User:
    user = group.member(user_id)
    if user is None:
        raise ValueError(f"User {user_id} is not a member of this group")
    return user


def build_expense(group: Group, expense_data: ExpenseCreate, expense_id: Optional[str] = None) -> Expense:
    """
    Validate expense input against a group and build the record.
    Raises ValueError for invalid amounts, empty or non-member participants.
    """
    if not is_valid_amount(expense_data.amount):
        raise ValueError("Amount must be a finite, non-negative number")
    if not expense_data.participant_ids:
        raise ValueError("At least one participant is required")

    payer = _require_member(group, expense_data.paid_by_id)
    participants = []
    for user_id in expense_data.participant_ids:
        user = _require_member(group, user_id)
        if user not in participants:
            participants.append(user)

    fields = dict(
        title=expense_data.title,
        amount=expense_data.amount,
        paid_by=payer,
        participants=participants,
        date=expense_data.date or datetime.utcnow(),
        group_id=group.id,
        category=expense_data.category,
        is_recurring=expense_data.is_recurring
    )
    if expense_id:
        fields["id"] = expense_id
    return Expense(**fields)


def _save_expenses(db: Session, group: Group) -> None:
    update_fields(db, GROUPS, group.id, {
        "expenses": [expense_to_document(e) for e in group.expenses],
        "activity": [activity_to_document(a) for a in group.activity],
    })


def _find_expense_index(group: Group, expense_id: str) -> int:
    for index, expense in enumerate(group.expenses):
        if expense.id == expense_id:
            return index
    raise LookupError(f"Expense {expense_id} not found")


def add_expense(db: Session, group_id: str, expense_data: ExpenseCreate) -> Expense:
    """Add a new expense to a group."""
    group = get_group(db, group_id)
    expense = build_expense(group, expense_data)

    group.expenses.append(expense)
    log_activity(group, f"Added expense {expense.title} for {format_amount(expense.amount, group.currency)}")
    _save_expenses(db, group)

    logger.info(f"Added expense {expense.id} to group {group_id}")
    return expense


def update_expense(db: Session, group_id: str, expense_id: str, expense_data: ExpenseCreate) -> Expense:
    """Replace an existing expense, matched on its id. Comments are kept."""
    group = get_group(db, group_id)
    index = _find_expense_index(group, expense_id)

    expense = build_expense(group, expense_data, expense_id=expense_id)
    expense.comments = group.expenses[index].comments
    group.expenses[index] = expense
    log_activity(group, f"Updated expense {expense.title} to {format_amount(expense.amount, group.currency)}")
    _save_expenses(db, group)

    return expense


def delete_expense(db: Session, group_id: str, expense_id: str) -> None:
    """Delete an expense from a group."""
    group = get_group(db, group_id)
    index = _find_expense_index(group, expense_id)

    expense = group.expenses.pop(index)
    log_activity(group, f"Deleted expense {expense.title}")
    _save_expenses(db, group)


def add_comment(db: Session, group_id: str, expense_id: str, comment_data: CommentCreate) -> Comment:
    """Append a comment to an expense."""
    group = get_group(db, group_id)
    index = _find_expense_index(group, expense_id)
    author = _require_member(group, comment_data.user_id)

    comment = Comment(user=author, text=comment_data.text)
    expense = group.expenses[index]
    expense.comments.append(comment)
    log_activity(group, f"{author.name} commented on {expense.title}")
    _save_expenses(db, group)

    return comment


def _append_adjustments(db: Session, group: Group, adjustments: List[Adjustment]) -> None:
    for adjustment in adjustments:
        group.adjustments.append(adjustment)
        amount = format_amount(abs(adjustment.amount), group.currency)
        if adjustment.amount > 0:
            log_activity(group, f"{adjustment.from_user.name} paid {adjustment.to_user.name} {amount}")
        else:
            log_activity(group, f"{adjustment.from_user.name} forgave {adjustment.to_user.name} {amount}")

    update_fields(db, GROUPS, group.id, {
        "adjustments": [adjustment_to_document(a) for a in group.adjustments],
        "activity": [activity_to_document(a) for a in group.activity],
    })


def record_adjustment(db: Session, group_id: str, adjustment_data: AdjustmentCreate) -> Adjustment:
    """
    Record a payment (positive amount) or forgiveness (negative amount)
    between two members.
    """
    group = get_group(db, group_id)
    if adjustment_data.from_user_id == adjustment_data.to_user_id:
        raise ValueError("An adjustment needs two different members")
    if adjustment_data.amount == 0:
        raise ValueError("Adjustment amount must not be zero")

    adjustment = Adjustment(
        from_user=_require_member(group, adjustment_data.from_user_id),
        to_user=_require_member(group, adjustment_data.to_user_id),
        amount=adjustment_data.amount
    )
    _append_adjustments(db, group, [adjustment])
    return adjustment


def settle_group(
    db: Session,
    group_id: str,
    strategy: Optional[SettlementStrategy] = None,
    epsilon: float = EPSILON
) -> List[Adjustment]:
    """
    Accept the current settlement and persist it as adjustments.
    Afterwards every member's balance is zero (within epsilon).
    """
    group = get_group(db, group_id)
    strategy = SettlementStrategy(strategy) if strategy else settlement_strategy_for(group)
    transfers = compute_settlement(group_balances(group), strategy, epsilon)
    adjustments = transfers_to_adjustments(transfers, group.members)

    if adjustments:
        _append_adjustments(db, group, adjustments)
        logger.info(f"Settled group {group_id} with {len(adjustments)} {strategy.value} transfers")
    return adjustments


def add_direct_expense(db: Session, me: User, expense_data: DirectExpenseCreate) -> Expense:
    """
    Record an expense shared between the current user and one friend.
    Raises ValueError unless it involves exactly two distinct users.
    """
    friend = expense_data.friend
    payer = me if expense_data.paid_by_me else friend
    expense = Expense(
        title=expense_data.title,
        amount=expense_data.amount,
        paid_by=payer,
        participants=[me, friend],
        date=expense_data.date or datetime.utcnow(),
        category=expense_data.category
    )
    if not is_valid_amount(expense.amount):
        raise ValueError("Amount must be a finite, non-negative number")
    if not is_direct_pair(expense):
        raise ValueError("A direct expense needs exactly two different users")

    set_document(db, DIRECT_EXPENSES, expense.id, expense_to_document(expense))
    logger.info(f"Added direct expense {expense.id} between {me.id} and {friend.id}")
    return expense


def list_direct_expenses(db: Session, user_id: Optional[str] = None) -> List[Expense]:
    """Direct expenses, optionally only those the user takes part in."""
    expenses = [expense_from_document(data) for data in list_documents(db, DIRECT_EXPENSES)]
    if user_id:
        expenses = [e for e in expenses if any(p.id == user_id for p in e.participants)]
    return expenses
