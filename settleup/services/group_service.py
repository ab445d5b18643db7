"""
Group service for group lifecycle, membership and activity feed.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from settleup.core.config import settings
from settleup.schemas.user import User
from settleup.schemas.group import Group, GroupCreate, GroupUpdate, Activity
from settleup.services.currency_service import Currency
from settleup.services.document_store import (
    get_document, set_document, update_fields, delete_document, list_documents
)
from settleup.services.serializers import (
    group_to_document, group_from_document, activity_to_document,
    user_to_document, expense_to_document
)

logger = logging.getLogger(__name__)

GROUPS = "groups"


def log_activity(group: Group, text: str) -> Activity:
    """Append an entry to the group's activity feed (in memory)."""
    activity = Activity(text=text)
    group.activity.append(activity)
    return activity


def _activity_fields(group: Group) -> dict:
    return {"activity": [activity_to_document(a) for a in group.activity]}


def get_group(db: Session, group_id: str) -> Group:
    """Load a group. Raises LookupError if it does not exist."""
    data = get_document(db, GROUPS, group_id)
    if data is None:
        raise LookupError(f"Group {group_id} not found")
    return group_from_document(data)


def save_group(db: Session, group: Group) -> Group:
    """Persist the whole group document."""
    set_document(db, GROUPS, group.id, group_to_document(group))
    return group


def list_groups(db: Session, member_id: Optional[str] = None) -> List[Group]:
    """All groups, optionally only those with the given member."""
    groups = [group_from_document(data) for data in list_documents(db, GROUPS)]
    if member_id:
        groups = [g for g in groups if g.member(member_id)]
    return groups


def create_group(db: Session, group_data: GroupCreate) -> Group:
    """Create a new group and log its creation."""
    members = []
    for user in group_data.members:
        if user not in members:
            members.append(user)

    group = Group(
        name=group_data.name,
        members=members,
        currency=group_data.currency or Currency.from_code(settings.DEFAULT_CURRENCY),
        simplify_debts=group_data.simplify_debts,
        is_public=group_data.is_public,
        budget=group_data.budget
    )
    log_activity(group, f"Created group {group.name}")
    save_group(db, group)

    logger.info(f"Created group {group.id} with {len(members)} members")
    return group


def update_group(db: Session, group_id: str, group_data: GroupUpdate) -> Group:
    """Rename a group, toggle simplify-debts or change its currency."""
    group = get_group(db, group_id)
    fields = {}

    if group_data.name is not None and group_data.name.strip() and group_data.name.strip() != group.name:
        group.name = group_data.name.strip()
        fields["name"] = group.name
        log_activity(group, f"Renamed group to {group.name}")

    if group_data.simplify_debts is not None and group_data.simplify_debts != group.simplify_debts:
        group.simplify_debts = group_data.simplify_debts
        fields["simplify_debts"] = group.simplify_debts
        log_activity(group, f"Simplify group debts {'enabled' if group.simplify_debts else 'disabled'}")

    if group_data.currency is not None and group_data.currency != group.currency:
        group.currency = group_data.currency
        fields["currency"] = group.currency.value
        log_activity(group, f"Changed group currency to {group.currency.code}")

    if fields:
        fields.update(_activity_fields(group))
        update_fields(db, GROUPS, group.id, fields)

    return group


def delete_group(db: Session, group_id: str) -> None:
    """Delete a group entirely. Raises LookupError if it does not exist."""
    if not delete_document(db, GROUPS, group_id):
        raise LookupError(f"Group {group_id} not found")
    logger.info(f"Deleted group {group_id}")


def add_member(db: Session, group_id: str, user: User) -> Group:
    """Add a member to a group if not already present."""
    group = get_group(db, group_id)
    if user in group.members:
        return group

    group.members.append(user)
    log_activity(group, f"Added member {user.name}")

    fields = {"members": [user_to_document(u) for u in group.members]}
    fields.update(_activity_fields(group))
    update_fields(db, GROUPS, group.id, fields)
    return group


def remove_member(db: Session, group_id: str, user_id: str) -> Group:
    """
    Remove a member and drop every expense they paid or shared.
    Adjustments naming the member are kept; balance computation skips them.
    """
    group = get_group(db, group_id)
    user = group.member(user_id)
    if user is None:
        raise LookupError(f"User {user_id} is not a member of group {group_id}")

    before = len(group.expenses)
    group.expenses = [
        e for e in group.expenses
        if e.paid_by.id != user_id and all(p.id != user_id for p in e.participants)
    ]
    group.members = [u for u in group.members if u.id != user_id]
    log_activity(group, f"Removed member {user.name}")

    fields = {
        "members": [user_to_document(u) for u in group.members],
        "expenses": [expense_to_document(e) for e in group.expenses],
    }
    fields.update(_activity_fields(group))
    update_fields(db, GROUPS, group.id, fields)

    logger.info(f"Removed member {user_id} from group {group_id}, dropped {before - len(group.expenses)} expenses")
    return group
