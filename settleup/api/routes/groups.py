"""
Group management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from settleup.db.session import get_db
from settleup.schemas.user import User
from settleup.schemas.group import Group, GroupCreate, GroupUpdate, Activity
from settleup.services import group_service

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_or_404(group_id: str, db: Session) -> Group:
    """Load a group or raise 404."""
    try:
        return group_service.get_group(db, group_id)
    except LookupError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found"
        )


@router.post("", response_model=Group, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    db: Session = Depends(get_db)
):
    """Create a new group."""
    return group_service.create_group(db, group_data)


@router.get("", response_model=List[Group])
async def list_groups(
    member_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List groups, optionally only those a user belongs to."""
    return group_service.list_groups(db, member_id)


@router.get("/{group_id}", response_model=Group)
async def get_group(
    group_id: str,
    db: Session = Depends(get_db)
):
    """Get group by ID."""
    return get_group_or_404(group_id, db)


@router.patch("/{group_id}", response_model=Group)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    db: Session = Depends(get_db)
):
    """Rename a group, toggle simplify-debts or change its currency."""
    get_group_or_404(group_id, db)
    return group_service.update_group(db, group_id, group_data)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    db: Session = Depends(get_db)
):
    """Delete a group."""
    try:
        group_service.delete_group(db, group_id)
    except LookupError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found"
        )


@router.get("/{group_id}/activity", response_model=List[Activity])
async def get_activity(
    group_id: str,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """Get the group's activity feed, newest first."""
    group = get_group_or_404(group_id, db)
    activity = sorted(group.activity, key=lambda a: a.date, reverse=True)
    return activity[:limit] if limit else activity


@router.post("/{group_id}/members", response_model=Group, status_code=status.HTTP_201_CREATED)
async def add_member(
    group_id: str,
    user: User,
    db: Session = Depends(get_db)
):
    """Add a member to a group."""
    get_group_or_404(group_id, db)
    return group_service.add_member(db, group_id, user)


@router.delete("/{group_id}/members/{user_id}", response_model=Group)
async def remove_member(
    group_id: str,
    user_id: str,
    db: Session = Depends(get_db)
):
    """Remove a member and every expense they took part in."""
    get_group_or_404(group_id, db)
    try:
        return group_service.remove_member(db, group_id, user_id)
    except LookupError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
