"""
Direct ledger service for friend-to-friend expenses.

Direct expenses involve exactly two people and no group. Positions are kept
as signed running totals per ordered pair ``(payer, other)`` instead of a
per-user net balance.
"""
import logging
from typing import Dict, Iterable, List, Tuple
from settleup.schemas.expense import Expense
from settleup.services.balance_service import is_valid_amount, EPSILON

logger = logging.getLogger(__name__)

PairBalances = Dict[Tuple[str, str], float]


def is_direct_pair(expense: Expense) -> bool:
    """Exactly two distinct participants, one of whom paid."""
    participant_ids = {p.id for p in expense.participants}
    return (
        len(expense.participants) == 2
        and len(participant_ids) == 2
        and expense.paid_by.id in participant_ids
    )


def compute_pair_balances(expenses: Iterable[Expense]) -> PairBalances:
    """
    Accumulate pairwise positions.

    For every two-party expense the non-payer's share is added to
    ``balances[(payer, other)]`` and subtracted from ``balances[(other, payer)]``,
    so ``balances[(a, b)]`` is what b owes a.
    """
    balances: PairBalances = {}
    for expense in expenses:
        if not is_valid_amount(expense.amount) or not is_direct_pair(expense):
            logger.debug(f"Skipping expense {expense.id}: not a valid two-party expense")
            continue

        payer_id = expense.paid_by.id
        other_id = next(p.id for p in expense.participants if p.id != payer_id)
        share = expense.amount / 2

        balances[(payer_id, other_id)] = balances.get((payer_id, other_id), 0.0) + share
        balances[(other_id, payer_id)] = balances.get((other_id, payer_id), 0.0) - share

    return balances


def amount_owed(balances: PairBalances, debtor_id: str, creditor_id: str) -> float:
    """
    Net amount ``debtor_id`` owes ``creditor_id``.

    Both directions of the pair are netted into one figure; a negative
    result means the creditor owes the debtor instead.
    """
    return (balances.get((creditor_id, debtor_id), 0.0) - balances.get((debtor_id, creditor_id), 0.0)) / 2


def counterparties(balances: PairBalances, user_id: str) -> List[str]:
    """Users with a direct relationship to ``user_id``, in first-seen order."""
    seen = []
    for first, second in balances:
        if first == user_id and second not in seen:
            seen.append(second)
    return seen


def direct_positions(balances: PairBalances, user_id: str, epsilon: float = EPSILON) -> Dict[str, float]:
    """
    Positions of ``user_id`` against every counterparty.
    Positive means the counterparty owes ``user_id``; settled pairs are omitted.
    """
    positions = {}
    for other_id in counterparties(balances, user_id):
        position = amount_owed(balances, other_id, user_id)
        if abs(position) > epsilon:
            positions[other_id] = position
    return positions
