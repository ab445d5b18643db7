"""
Serialization boundary between ledger entities and store documents.

Each entity has an explicit pair of functions. Decoding is lenient about
optional fields so documents written by older clients still load.
"""
from typing import Any, Dict
from uuid import uuid4
from settleup.schemas.user import User
from settleup.schemas.expense import Expense, Comment, ExpenseCategory
from settleup.schemas.adjustment import Adjustment
from settleup.schemas.group import Group, Activity
from settleup.services.currency_service import Currency


def user_to_document(user: User) -> Dict[str, Any]:
    return {"id": user.id, "name": user.name, "email": user.email}


def user_from_document(data: Dict[str, Any]) -> User:
    return User(id=data["id"], name=data["name"], email=data.get("email"))


def comment_to_document(comment: Comment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "user": user_to_document(comment.user),
        "text": comment.text,
        "date": comment.date.isoformat(),
    }


def comment_from_document(data: Dict[str, Any]) -> Comment:
    return Comment(
        id=data["id"],
        user=user_from_document(data["user"]),
        text=data["text"],
        date=data["date"],
    )


def expense_to_document(expense: Expense) -> Dict[str, Any]:
    return {
        "id": expense.id,
        "title": expense.title,
        "amount": expense.amount,
        "paid_by": user_to_document(expense.paid_by),
        "participants": [user_to_document(u) for u in expense.participants],
        "date": expense.date.isoformat(),
        "group_id": expense.group_id,
        "category": expense.category.value,
        "is_recurring": expense.is_recurring,
        "comments": [comment_to_document(c) for c in expense.comments],
    }


def expense_from_document(data: Dict[str, Any]) -> Expense:
    category = data.get("category") or ExpenseCategory.OTHER.value
    if category not in {c.value for c in ExpenseCategory}:
        category = ExpenseCategory.OTHER.value
    return Expense(
        id=data["id"],
        title=data["title"],
        amount=data["amount"],
        paid_by=user_from_document(data["paid_by"]),
        participants=[user_from_document(u) for u in data.get("participants", [])],
        date=data["date"],
        group_id=data.get("group_id"),
        category=category,
        is_recurring=data.get("is_recurring", False),
        comments=[comment_from_document(c) for c in data.get("comments", [])],
    )


def adjustment_to_document(adjustment: Adjustment) -> Dict[str, Any]:
    return {
        "id": adjustment.id,
        "from_user": user_to_document(adjustment.from_user),
        "to_user": user_to_document(adjustment.to_user),
        "amount": adjustment.amount,
        "date": adjustment.date.isoformat(),
    }


def adjustment_from_document(data: Dict[str, Any]) -> Adjustment:
    return Adjustment(
        id=data["id"],
        from_user=user_from_document(data["from_user"]),
        to_user=user_from_document(data["to_user"]),
        amount=data["amount"],
        date=data["date"],
    )


def activity_to_document(activity: Activity) -> Dict[str, Any]:
    return {"id": activity.id, "text": activity.text, "date": activity.date.isoformat()}


def activity_from_document(data: Dict[str, Any]) -> Activity:
    return Activity(id=data["id"], text=data["text"], date=data["date"])


def group_to_document(group: Group) -> Dict[str, Any]:
    return {
        "id": group.id,
        "name": group.name,
        "members": [user_to_document(u) for u in group.members],
        "expenses": [expense_to_document(e) for e in group.expenses],
        "adjustments": [adjustment_to_document(a) for a in group.adjustments],
        "activity": [activity_to_document(a) for a in group.activity],
        "currency": group.currency.value,
        "simplify_debts": group.simplify_debts,
        "is_public": group.is_public,
        "budget": group.budget,
    }


def group_from_document(data: Dict[str, Any]) -> Group:
    return Group(
        id=data.get("id") or str(uuid4()),
        name=data["name"],
        members=[user_from_document(u) for u in data.get("members", [])],
        expenses=[expense_from_document(e) for e in data.get("expenses", [])],
        adjustments=[adjustment_from_document(a) for a in data.get("adjustments", [])],
        activity=[activity_from_document(a) for a in data.get("activity", [])],
        currency=Currency.from_code(data.get("currency") or Currency.USD.value),
        simplify_debts=data.get("simplify_debts", False),
        is_public=data.get("is_public", False),
        budget=data.get("budget"),
    )
