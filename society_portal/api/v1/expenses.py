"""Society expense endpoints (admin only)"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from society_portal.api.dependencies import get_change_event_client, require_admin
from society_portal.api.v1.schemas import ExpenseCreate, ExpenseResponse, ExpenseSummaryResponse
from society_portal.domain.filters import filter_expenses
from society_portal.domain.models import Expense, ExpenseCategory
from society_portal.domain.statistics import expense_summary
from society_portal.infrastructure.clients.change_events import INSERT, ChangeEventClient, change_event
from society_portal.infrastructure.database.models import Profile
from society_portal.infrastructure.database.repositories import ExpenseRepository
from society_portal.infrastructure.database.session import get_db
from society_portal.utils import date_utils

router = APIRouter()


@router.get("/expenses", response_model=List[ExpenseResponse])
def list_expenses(
    search: str = Query("", description="Matches description, vendor or category"),
    category: Optional[ExpenseCategory] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    return filter_expenses(ExpenseRepository(db).list_all(), search=search, category=category, month=month)


@router.get("/expenses/summary", response_model=ExpenseSummaryResponse)
def get_expense_summary(
    search: str = Query(""),
    category: Optional[ExpenseCategory] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    """Filtered total and count, plus this month against last month"""
    expenses = ExpenseRepository(db).list_all()
    filtered = filter_expenses(expenses, search=search, category=category, month=month)
    return expense_summary(expenses, date_utils.today(), filtered=filtered)


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
def create_expense(
    body: ExpenseCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """Record an expense; the approving admin is the caller"""
    record = ExpenseRepository(db).create(
        Expense(
            category=body.category,
            description=body.description,
            amount=body.amount,
            date=body.date,
            vendor=body.vendor,
            approved_by=admin.name,
        ),
        receipt_url=body.receipt_url,
    )
    db.commit()

    background_tasks.add_task(events.publish, change_event("expenses", INSERT, record.id))
    return record
