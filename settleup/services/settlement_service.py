"""
Settlement service: turn net balances into payer -> payee transfers.
"""
import enum
import logging
import math
from typing import Dict, List, Optional, Sequence
from settleup.schemas.user import User
from settleup.schemas.adjustment import Adjustment
from settleup.schemas.group import Group
from settleup.schemas.settlement import SettlementSummary, TransferResponse, BalanceEntry
from settleup.services.balance_service import group_balances, total_expenses, EPSILON
from settleup.services.currency_service import format_amount

logger = logging.getLogger(__name__)


class SettlementStrategy(str, enum.Enum):
    """Settlement strategy enumeration."""
    STANDARD = "standard"
    SIMPLIFIED = "simplified"


class Transfer:
    """Represents a single transfer between users."""
    def __init__(self, payer_id: str, payee_id: str, amount: float):
        self.payer_id = payer_id
        self.payee_id = payee_id
        self.amount = amount

    def __repr__(self):
        return f"Transfer({self.payer_id!r} -> {self.payee_id!r}: {self.amount:.2f})"


def _finite_balances(balances: Dict[str, float]) -> Dict[str, float]:
    """Drop NaN and infinite balances, which no transfer can settle."""
    finite = {}
    for uid, bal in balances.items():
        if not math.isfinite(bal):
            logger.warning(f"Skipping non-finite balance {bal!r} for {uid}")
            continue
        finite[uid] = bal
    return finite


def standard_transfers(balances: Dict[str, float], epsilon: float = EPSILON) -> List[Transfer]:
    """
    Pair debtors with creditors in input order.

    Each debtor pays creditors one after another until the debtor's debt
    is exhausted. The result keeps who-owes-whom readable rather than
    minimising the number of transfers.
    """
    balances = _finite_balances(balances)
    debtors = [[uid, -bal] for uid, bal in balances.items() if bal < -epsilon]
    creditors = [[uid, bal] for uid, bal in balances.items() if bal > epsilon]

    transfers = []
    for debtor in debtors:
        for creditor in creditors:
            if debtor[1] <= epsilon:
                break
            if creditor[1] <= epsilon:
                continue

            amount = min(debtor[1], creditor[1])
            transfers.append(Transfer(debtor[0], creditor[0], amount))
            debtor[1] -= amount
            creditor[1] -= amount

        if debtor[1] > epsilon:
            logger.warning(f"Balances do not sum to zero, {debtor[0]} left with {debtor[1]:.2f} unpaid")

    return transfers


def simplified_transfers(balances: Dict[str, float], epsilon: float = EPSILON) -> List[Transfer]:
    """
    Minimise the number of transfers with a two-pointer greedy sweep.

    Balances are sorted ascending; the most indebted user pays the most
    owed user until one of them is settled, then the pointer of the
    settled side moves inward.
    """
    balances = _finite_balances(balances)
    entries = [[uid, 0.0 if abs(bal) < epsilon else bal] for uid, bal in balances.items()]
    entries.sort(key=lambda x: x[1])

    transfers = []
    i, j = 0, len(entries) - 1

    while i < j:
        debtor, creditor = entries[i], entries[j]
        if debtor[1] >= -epsilon:
            i += 1
            continue
        if creditor[1] <= epsilon:
            j -= 1
            continue

        amount = min(-debtor[1], creditor[1])
        transfers.append(Transfer(debtor[0], creditor[0], amount))
        debtor[1] += amount
        creditor[1] -= amount

        if abs(debtor[1]) < epsilon:
            i += 1
        if abs(creditor[1]) < epsilon:
            j -= 1

    return transfers


def compute_settlement(
    balances: Dict[str, float],
    strategy: SettlementStrategy = SettlementStrategy.STANDARD,
    epsilon: float = EPSILON
) -> List[Transfer]:
    """
    Calculate the transfers that bring every balance to zero.

    Args:
        balances: user id -> net balance (positive = owed, negative = owes)
        strategy: standard (pairwise, input order) or simplified (fewest transfers)
        epsilon: balances closer to zero than this count as settled

    Returns:
        Ordered list of transfers; empty when everyone is already settled
    """
    if SettlementStrategy(strategy) == SettlementStrategy.SIMPLIFIED:
        return simplified_transfers(balances, epsilon)
    return standard_transfers(balances, epsilon)


def settlement_strategy_for(group: Group) -> SettlementStrategy:
    """Strategy selected by the group's simplify-debts flag."""
    return SettlementStrategy.SIMPLIFIED if group.simplify_debts else SettlementStrategy.STANDARD


def transfers_to_adjustments(transfers: Sequence[Transfer], members: Sequence[User]) -> List[Adjustment]:
    """
    Convert accepted transfers into adjustment records.
    Transfers naming users outside ``members`` are dropped.
    """
    users = {user.id: user for user in members}
    adjustments = []
    for transfer in transfers:
        payer = users.get(transfer.payer_id)
        payee = users.get(transfer.payee_id)
        if payer is None or payee is None:
            logger.warning(f"Dropping transfer {transfer!r}: user is not a member")
            continue
        adjustments.append(Adjustment(from_user=payer, to_user=payee, amount=transfer.amount))
    return adjustments


def calculate_settlement(
    group: Group,
    strategy: Optional[SettlementStrategy] = None,
    epsilon: float = EPSILON
) -> SettlementSummary:
    """
    Calculate balances and settlement for a group.
    Uses the group's simplify-debts flag unless a strategy is given.
    """
    strategy = SettlementStrategy(strategy) if strategy else settlement_strategy_for(group)
    net_balances = group_balances(group)
    transfers = compute_settlement(net_balances, strategy, epsilon)

    names = {user.id: user.name for user in group.members}
    balance_entries = [
        BalanceEntry(user_id=uid, name=names.get(uid, ""), balance=bal)
        for uid, bal in net_balances.items()
    ]
    transfer_entries = [
        TransferResponse(
            payer_id=t.payer_id,
            payer_name=names.get(t.payer_id, ""),
            payee_id=t.payee_id,
            payee_name=names.get(t.payee_id, ""),
            amount=round(t.amount, 2)
        )
        for t in transfers
    ]
    total = total_expenses(group.expenses)

    # Create summary text
    summary_lines = []
    summary_lines.append(f"Total expenses: {format_amount(total, group.currency)}")
    summary_lines.append(f"Participants: {len(net_balances)}")
    summary_lines.append("\nNet balances:")
    for entry in balance_entries:
        summary_lines.append(f"  {entry.name}: {entry.balance:+.2f} {group.currency.code}")
    summary_lines.append("\nTransfers:")
    for entry in transfer_entries:
        summary_lines.append(
            f"  {entry.payer_name} -> {entry.payee_name}: "
            f"{format_amount(entry.amount, group.currency)}"
        )

    return SettlementSummary(
        group_id=group.id,
        strategy=strategy.value,
        currency=group.currency,
        net_balances=balance_entries,
        transfers=transfer_entries,
        total_expenses=total,
        participant_count=len(net_balances),
        summary="\n".join(summary_lines)
    )
