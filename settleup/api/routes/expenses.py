"""
Expense and adjustment routes for group ledgers.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from settleup.db.session import get_db
from settleup.schemas.expense import Expense, ExpenseCreate, ExpenseCategory, Comment, CommentCreate
from settleup.schemas.adjustment import Adjustment, AdjustmentCreate
from settleup.services import expense_service
from settleup.api.routes.groups import get_group_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups/{group_id}", tags=["expenses"])


def _bad_request(e: ValueError) -> HTTPException:
    logger.info(f"Rejected ledger input: {e}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(e)
    )


def _not_found(e: LookupError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(e)
    )


@router.get("/expenses", response_model=List[Expense])
async def list_expenses(
    group_id: str,
    category: Optional[ExpenseCategory] = None,
    db: Session = Depends(get_db)
):
    """Get a group's expenses, newest first."""
    group = get_group_or_404(group_id, db)
    expenses = group.expenses
    if category:
        expenses = [e for e in expenses if e.category == category]
    return sorted(expenses, key=lambda e: e.date, reverse=True)


@router.post("/expenses", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def create_expense(
    group_id: str,
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db)
):
    """Add an expense split equally among its participants."""
    get_group_or_404(group_id, db)
    try:
        return expense_service.add_expense(db, group_id, expense_data)
    except ValueError as e:
        raise _bad_request(e)


@router.put("/expenses/{expense_id}", response_model=Expense)
async def update_expense(
    group_id: str,
    expense_id: str,
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db)
):
    """Replace an expense as a whole."""
    get_group_or_404(group_id, db)
    try:
        return expense_service.update_expense(db, group_id, expense_id, expense_data)
    except ValueError as e:
        raise _bad_request(e)
    except LookupError as e:
        raise _not_found(e)


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    group_id: str,
    expense_id: str,
    db: Session = Depends(get_db)
):
    """Delete an expense."""
    get_group_or_404(group_id, db)
    try:
        expense_service.delete_expense(db, group_id, expense_id)
    except LookupError as e:
        raise _not_found(e)


@router.post("/expenses/{expense_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def add_comment(
    group_id: str,
    expense_id: str,
    comment_data: CommentCreate,
    db: Session = Depends(get_db)
):
    """Comment on an expense."""
    get_group_or_404(group_id, db)
    try:
        return expense_service.add_comment(db, group_id, expense_id, comment_data)
    except ValueError as e:
        raise _bad_request(e)
    except LookupError as e:
        raise _not_found(e)


@router.get("/adjustments", response_model=List[Adjustment])
async def list_adjustments(
    group_id: str,
    db: Session = Depends(get_db)
):
    """Get a group's adjustments in the order they were recorded."""
    return get_group_or_404(group_id, db).adjustments


@router.post("/adjustments", response_model=Adjustment, status_code=status.HTTP_201_CREATED)
async def record_adjustment(
    group_id: str,
    adjustment_data: AdjustmentCreate,
    db: Session = Depends(get_db)
):
    """Record a payment (positive amount) or forgiveness (negative amount)."""
    get_group_or_404(group_id, db)
    try:
        return expense_service.record_adjustment(db, group_id, adjustment_data)
    except ValueError as e:
        raise _bad_request(e)
