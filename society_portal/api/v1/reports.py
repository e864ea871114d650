"""Dashboard statistics and financial reports"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from society_portal.api.dependencies import get_current_user, require_admin
from society_portal.api.v1.schemas import (
    BillResponse,
    CategoryTotal,
    DefaulterResponse,
    MemberSummaryResponse,
    NoticeResponse,
    PaymentStatusResponse,
    SocietyStatsResponse,
    YearlyReportResponse,
)
from society_portal.config import settings
from society_portal.domain.models import MemberStatus, Role
from society_portal.domain.statistics import (
    defaulters,
    expenses_by_category,
    member_summary,
    monthly_target,
    payment_status_breakdown,
    society_stats,
    yearly_report,
)
from society_portal.infrastructure.database.models import Profile
from society_portal.infrastructure.database.repositories import (
    BillRepository,
    ExpenseRepository,
    MemberRepository,
    NoticeRepository,
)
from society_portal.infrastructure.database.session import get_db
from society_portal.utils import date_utils

router = APIRouter()


@router.get("/reports/stats", response_model=SocietyStatsResponse)
def get_society_stats(db: Session = Depends(get_db), admin: Profile = Depends(require_admin)):
    """
    Current-month dashboard figures.

    Returns:
        Member counts, collection, expenses, net balance, collection rate,
        overdue member count and monthly target
    """
    return society_stats(
        MemberRepository(db).list_all(role=Role.MEMBER),
        BillRepository(db).list_all(),
        ExpenseRepository(db).list_all(),
        today=date_utils.today(),
        standard_assessment=settings.standard_assessment,
    )


@router.get("/reports/yearly", response_model=YearlyReportResponse)
def get_yearly_report(
    year: Optional[int] = Query(None, description="Defaults to the current year"),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    """Yearly income/expense totals with a Jan..Dec series and collection analytics against the monthly target"""
    active = MemberRepository(db).list_by_status(MemberStatus.ACTIVE, role=Role.MEMBER)
    return yearly_report(
        BillRepository(db).list_all(),
        ExpenseRepository(db).list_all(),
        year or date_utils.today().year,
        target=monthly_target(len(active), settings.standard_assessment),
    )


@router.get("/reports/expense-categories", response_model=List[CategoryTotal])
def get_expense_categories(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    ranked = expenses_by_category(ExpenseRepository(db).list_all(), limit=limit)
    return [CategoryTotal(category=category, amount=amount) for category, amount in ranked]


@router.get("/reports/payment-status", response_model=PaymentStatusResponse)
def get_payment_status(db: Session = Depends(get_db), admin: Profile = Depends(require_admin)):
    return payment_status_breakdown(BillRepository(db).list_all())


@router.get("/reports/defaulters", response_model=List[DefaulterResponse])
def get_defaulters(db: Session = Depends(get_db), admin: Profile = Depends(require_admin)):
    """Members with bills marked overdue, largest arrears first"""
    return defaulters(MemberRepository(db).list_all(), BillRepository(db).list_all())


@router.get("/reports/me", response_model=MemberSummaryResponse)
def get_member_dashboard(db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    """Outstanding amount, next due date, recent payments and active notices for the caller"""
    summary = member_summary(user.id, BillRepository(db).list_for_member(user.id))

    return MemberSummaryResponse(
        member_id=summary.member_id,
        pending_amount=summary.pending_amount,
        next_due_date=summary.next_due_date,
        unpaid_bills=[BillResponse.model_validate(b) for b in summary.unpaid_bills],
        recent_payments=[BillResponse.model_validate(b) for b in summary.recent_payments],
        notices=[NoticeResponse.model_validate(n) for n in NoticeRepository(db).list_all()],
    )
