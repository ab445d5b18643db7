"""
Tests for the balance engine.
"""
import math
import pytest
from settleup.schemas.expense import Expense
from settleup.schemas.adjustment import Adjustment
from settleup.schemas.group import Group
from settleup.schemas.user import User
from settleup.services.balance_service import (
    compute_balances, group_balances, friend_balance, balance_summary, known_friends, total_expenses
)
from settleup.services.currency_service import Currency


def make_expense(amount, paid_by, participants, **kwargs):
    return Expense(title="Test", amount=amount, paid_by=paid_by, participants=participants, **kwargs)


def test_equal_split_with_payer_included(alice, bob, carol):
    """90 split three ways: payer +60, others -30."""
    expense = make_expense(90, alice, [alice, bob, carol])
    balances = compute_balances([alice, bob, carol], [expense], [])
    assert balances == pytest.approx({"alice": 60, "bob": -30, "carol": -30})


def test_scenario_three_members(alice, bob, carol):
    expense = make_expense(120, alice, [alice, bob, carol])
    balances = compute_balances([alice, bob, carol], [expense], [])
    assert balances == pytest.approx({"alice": 80, "bob": -40, "carol": -40})


def test_payer_not_participating(alice, bob, carol):
    expense = make_expense(50, alice, [bob, carol])
    balances = compute_balances([alice, bob, carol], [expense], [])
    assert balances == pytest.approx({"alice": 50, "bob": -25, "carol": -25})


def test_members_without_expenses_appear_with_zero(alice, bob, carol, dave):
    expense = make_expense(20, alice, [alice, bob])
    balances = compute_balances([alice, bob, carol, dave], [expense], [])
    assert list(balances) == ["alice", "bob", "carol", "dave"]
    assert balances["carol"] == 0
    assert balances["dave"] == 0


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf"), -10])
def test_malformed_amounts_are_skipped(alice, bob, amount):
    good = make_expense(10, alice, [alice, bob])
    bad = make_expense(amount, bob, [alice, bob])
    balances = compute_balances([alice, bob], [good, bad], [])
    assert balances == pytest.approx({"alice": 5, "bob": -5})


def test_expense_without_participants_is_skipped(alice, bob):
    expense = make_expense(10, alice, [])
    assert compute_balances([alice, bob], [expense], []) == {"alice": 0, "bob": 0}


def test_adjustment_settles_debt(alice, bob):
    expense = make_expense(40, alice, [alice, bob])
    payment = Adjustment(from_user=bob, to_user=alice, amount=20)
    balances = compute_balances([alice, bob], [expense], [payment])
    assert balances == pytest.approx({"alice": 0, "bob": 0})


def test_negative_adjustment_is_forgiveness(alice, bob):
    expense = make_expense(40, alice, [alice, bob])
    # Alice forgives 5 of the 20 Bob owes her
    forgiveness = Adjustment(from_user=alice, to_user=bob, amount=-5)
    balances = compute_balances([alice, bob], [expense], [forgiveness])
    assert balances == pytest.approx({"alice": 15, "bob": -15})


def test_adjustment_with_non_member_is_skipped(alice, bob, carol):
    expense = make_expense(40, alice, [alice, bob])
    stale = Adjustment(from_user=carol, to_user=alice, amount=10)
    balances = compute_balances([alice, bob], [expense], [stale])
    assert balances == pytest.approx({"alice": 20, "bob": -20})


def test_conservation(alice, bob, carol, dave):
    expenses = [
        make_expense(100, alice, [alice, bob, carol]),
        make_expense(33.33, bob, [alice, bob, carol, dave]),
        make_expense(7.77, dave, [carol]),
        make_expense(float("nan"), carol, [alice]),
    ]
    adjustments = [
        Adjustment(from_user=carol, to_user=alice, amount=12.5),
        Adjustment(from_user=bob, to_user=dave, amount=-3),
    ]
    balances = compute_balances([alice, bob, carol, dave], expenses, adjustments)
    assert math.fsum(balances.values()) == pytest.approx(0, abs=1e-6)


def test_idempotent_and_does_not_mutate_input(alice, bob, carol):
    members = [alice, bob, carol]
    expenses = [make_expense(60, bob, [alice, bob, carol])]
    adjustments = [Adjustment(from_user=alice, to_user=bob, amount=10)]
    snapshot = [e.model_dump() for e in expenses]

    first = compute_balances(members, expenses, adjustments)
    second = compute_balances(members, expenses, adjustments)

    assert first == second
    assert [e.model_dump() for e in expenses] == snapshot
    assert len(adjustments) == 1


def test_group_balances(alice, bob):
    group = Group(
        name="Flat",
        members=[alice, bob],
        expenses=[make_expense(30, bob, [alice, bob])],
    )
    assert group_balances(group) == pytest.approx({"alice": -15, "bob": 15})


def test_total_expenses_ignores_malformed(alice, bob):
    expenses = [make_expense(10, alice, [bob]), make_expense(-4, bob, [alice]), make_expense(2.5, bob, [alice])]
    assert total_expenses(expenses) == pytest.approx(12.5)


def test_user_identity_is_by_id():
    assert User(id="x", name="Old") == User(id="x", name="New")
    assert len({User(id="x", name="Old"), User(id="x", name="New")}) == 1


def test_friend_balance_across_direct_and_group(alice, bob, carol):
    direct = [make_expense(40, alice, [alice, bob])]
    group = Group(
        name="Trip",
        members=[alice, bob, carol],
        currency=Currency.EUR,
        expenses=[make_expense(30, bob, [alice, bob, carol])],
    )
    # Direct: Bob owes Alice 20. Group: Alice owes Bob 10 EUR = 10.8 USD.
    balance = friend_balance(alice, bob, direct, [group], Currency.USD)
    assert balance == pytest.approx(20 - 10.8)
    assert friend_balance(bob, alice, direct, [group], Currency.USD) == pytest.approx(-(20 - 10.8))


def test_friend_balance_ignores_expenses_of_others(alice, bob, carol):
    group = Group(
        name="Trip",
        members=[alice, bob, carol],
        expenses=[make_expense(30, carol, [bob, carol])],
    )
    assert friend_balance(alice, bob, [], [group]) == 0


def test_balance_summary(alice, bob, carol):
    direct = [
        make_expense(40, alice, [alice, bob]),
        make_expense(10, carol, [alice, carol]),
    ]
    owe, owed = balance_summary(alice, [bob, carol], direct, [])
    assert owe == pytest.approx(-5)
    assert owed == pytest.approx(20)


def test_known_friends(alice, bob, carol, dave):
    direct = [make_expense(10, alice, [alice, dave])]
    groups = [
        Group(name="A", members=[alice, carol]),
        Group(name="B", members=[bob, carol]),
    ]
    assert [u.id for u in known_friends(alice, direct, groups)] == ["carol", "dave"]


def test_overflowing_expense_is_skipped(alice, bob):
    expenses = [make_expense(1e308, alice, [bob]) for _ in range(3)]
    balances = compute_balances([alice, bob], expenses, [])
    assert all(math.isfinite(value) for value in balances.values())
    assert balances == {"alice": 1e308, "bob": -1e308}
    assert total_expenses(expenses) == 1e308


def test_friend_balance_counts_group_adjustments(alice, bob, carol):
    group = Group(
        name="Trip",
        members=[alice, bob, carol],
        currency=Currency.EUR,
        expenses=[make_expense(40, alice, [alice, bob])],
        adjustments=[
            Adjustment(from_user=bob, to_user=alice, amount=15),
            Adjustment(from_user=carol, to_user=alice, amount=5),
        ],
    )
    # Bob owed 20 EUR and paid back 15 EUR, 5 EUR = 5.4 USD left
    assert friend_balance(alice, bob, [], [group], Currency.USD) == pytest.approx(5.4)
    assert friend_balance(bob, alice, [], [group], Currency.USD) == pytest.approx(-5.4)
