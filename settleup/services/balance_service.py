"""
Balance service: net positions derived from expenses and adjustments.

Balances are never stored. Every call recomputes from the full ledger
snapshot it is given and leaves that snapshot untouched.
"""
import logging
import math
from typing import Dict, Iterable, List, Tuple
from settleup.core.config import settings
from settleup.schemas.user import User
from settleup.schemas.expense import Expense
from settleup.schemas.adjustment import Adjustment
from settleup.schemas.group import Group
from settleup.services.currency_service import Currency, convert

logger = logging.getLogger(__name__)

# Balances within this distance of zero count as settled
EPSILON = settings.SETTLEMENT_EPSILON


def is_valid_amount(amount) -> bool:
    """True for finite, non-negative amounts."""
    try:
        return math.isfinite(amount) and amount >= 0
    except TypeError:
        return False


def is_countable(expense: Expense) -> bool:
    """Whether an expense may take part in aggregation."""
    return is_valid_amount(expense.amount) and len(expense.participants) > 0


def _apply(balances: Dict[str, float], changes: List[Tuple[str, float]]) -> bool:
    """Apply balance changes together, or not at all if any result overflows."""
    updated: Dict[str, float] = {}
    for user_id, delta in changes:
        updated[user_id] = updated.get(user_id, balances.get(user_id, 0.0)) + delta
    if not all(math.isfinite(value) for value in updated.values()):
        return False
    balances.update(updated)
    return True


def compute_balances(
    members: Iterable[User],
    expenses: Iterable[Expense],
    adjustments: Iterable[Adjustment]
) -> Dict[str, float]:
    """
    Compute each user's net balance.

    Positive means the user is owed money, negative means the user owes.
    Every member appears in the result, even with a zero balance. Expenses
    with a non-finite or negative amount, or without participants, are
    skipped. Adjustments referencing a non-member are skipped. A record that
    would push any balance past the float range is skipped as well, so every
    returned balance is finite.

    Returns:
        Mapping of user id to net balance, in member order
    """
    balances: Dict[str, float] = {user.id: 0.0 for user in members}
    member_ids = set(balances)

    for expense in expenses:
        if not is_countable(expense):
            logger.debug(f"Skipping malformed expense {expense.id} (amount={expense.amount!r})")
            continue

        share = expense.amount / len(expense.participants)
        changes = [(participant.id, -share) for participant in expense.participants]
        changes.append((expense.paid_by.id, expense.amount))
        if not _apply(balances, changes):
            logger.warning(f"Skipping expense {expense.id}: balances would overflow")

    for adjustment in adjustments:
        # Users removed from the group after the adjustment was recorded
        if adjustment.from_user.id not in member_ids or adjustment.to_user.id not in member_ids:
            logger.debug(f"Skipping adjustment {adjustment.id} referencing a non-member")
            continue
        if not math.isfinite(adjustment.amount):
            continue
        changes = [(adjustment.from_user.id, adjustment.amount), (adjustment.to_user.id, -adjustment.amount)]
        if not _apply(balances, changes):
            logger.warning(f"Skipping adjustment {adjustment.id}: balances would overflow")

    return balances


def group_balances(group: Group) -> Dict[str, float]:
    """Compute net balances for every member of a group."""
    return compute_balances(group.members, group.expenses, group.adjustments)


def total_expenses(expenses: Iterable[Expense]) -> float:
    """Sum of all countable expense amounts, leaving out any that would overflow."""
    total = 0.0
    for expense in expenses:
        if is_countable(expense) and math.isfinite(total + expense.amount):
            total += expense.amount
    return total


def friend_balance(
    me: User,
    friend: User,
    direct_expenses: Iterable[Expense],
    groups: Iterable[Group],
    currency: Currency = Currency.USD
) -> float:
    """
    Net position between two users across direct and group expenses.

    Positive means the friend owes me. Only expenses both users take part
    in (as payer or participant) count, along with group adjustments made
    between the two. Group amounts are converted from the group's currency;
    direct expenses are recorded in ``currency``.
    """
    balance = 0.0

    def position(expense: Expense, source: Currency) -> float:
        if not is_countable(expense):
            return 0.0
        participant_ids = {p.id for p in expense.participants}
        share = convert(expense.amount / len(expense.participants), source, currency)
        if expense.paid_by.id == me.id and friend.id in participant_ids:
            return share
        if expense.paid_by.id == friend.id and me.id in participant_ids:
            return -share
        return 0.0

    for expense in direct_expenses:
        balance += position(expense, currency)

    for group in groups:
        for expense in group.expenses:
            balance += position(expense, group.currency)
        # Recorded payments and settlements between the two
        for adjustment in group.adjustments:
            if not math.isfinite(adjustment.amount):
                continue
            amount = convert(adjustment.amount, group.currency, currency)
            if adjustment.from_user.id == me.id and adjustment.to_user.id == friend.id:
                balance += amount
            elif adjustment.from_user.id == friend.id and adjustment.to_user.id == me.id:
                balance -= amount

    return balance


def balance_summary(
    me: User,
    friends: Iterable[User],
    direct_expenses: List[Expense],
    groups: List[Group],
    currency: Currency = Currency.USD,
    epsilon: float = EPSILON
) -> Tuple[float, float]:
    """
    Totals of what I owe and what I am owed across all friends.

    Returns:
        (owe, owed) where owe is the non-positive sum of negative
        positions and owed the sum of positive positions beyond epsilon
    """
    owe, owed = 0.0, 0.0
    for friend in friends:
        if friend.id == me.id:
            continue
        position = friend_balance(me, friend, direct_expenses, groups, currency)
        if position < -epsilon:
            owe += position
        elif position > epsilon:
            owed += position
    return owe, owed


def known_friends(me: User, direct_expenses: Iterable[Expense], groups: Iterable[Group]) -> List[User]:
    """Everyone sharing a group or a direct expense with me, sorted by name."""
    friends = set()
    for group in groups:
        if group.member(me.id):
            friends.update(group.members)
    for expense in direct_expenses:
        if any(p.id == me.id for p in expense.participants):
            friends.update(expense.participants)
    friends.discard(me)
    return sorted(friends, key=lambda u: u.name)
