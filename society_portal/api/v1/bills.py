"""Maintenance bill endpoints: listing, monthly generation, payments"""

import logging
import time
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from society_portal.api.dependencies import (
    get_change_event_client,
    get_current_user,
    get_request_id,
    require_admin,
)
from society_portal.api.v1.schemas import (
    BillResponse,
    BillSummaryResponse,
    GenerateBillsRequest,
    GenerateBillsResponse,
    PaymentRequest,
)
from society_portal.config import settings
from society_portal.domain.billing import assign_overdue, generate_monthly_bills
from society_portal.domain.exceptions import BillAlreadyPaidError, InvalidTransitionError
from society_portal.domain.filters import filter_bills
from society_portal.domain.models import BillStatus, MemberStatus, Role
from society_portal.domain.payments import DEFAULT_ADMIN_METHOD, DEFAULT_MEMBER_METHOD, settle_bill
from society_portal.domain.statistics import bill_summary, past_due_bills
from society_portal.infrastructure.clients.change_events import INSERT, UPDATE, ChangeEventClient, change_event
from society_portal.infrastructure.database.models import BillRecord, Profile
from society_portal.infrastructure.database.repositories import BillRepository, MemberRepository
from society_portal.infrastructure.database.session import get_db
from society_portal.infrastructure.observability.logging import log_bill_generation, log_payment
from society_portal.infrastructure.observability.metrics import record_bill_generation, record_payment
from society_portal.utils import date_utils

router = APIRouter()


def _visible_bills(
    db: Session,
    user: Profile,
    search: str,
    status: Optional[BillStatus],
    month: Optional[int],
    year: Optional[int],
    member_id: Optional[str],
) -> List[BillRecord]:
    """Admins see every bill; members only their own"""
    if user.role != Role.ADMIN:
        member_id = user.id

    members_by_id = {m.id: m for m in MemberRepository(db).list_all()}
    return filter_bills(
        BillRepository(db).list_all(),
        members_by_id,
        search=search,
        status=status,
        month=month,
        year=year,
        member_id=member_id,
    )


@router.get("/bills", response_model=List[BillResponse])
def list_bills(
    search: str = Query("", description="Matches member name, flat number or month name"),
    status: Optional[BillStatus] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    member_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    return _visible_bills(db, user, search, status, month, year, member_id)


@router.get("/bills/summary", response_model=BillSummaryResponse)
def get_bill_summary(
    search: str = Query(""),
    status: Optional[BillStatus] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    member_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """Counts, amounts and collection rate of the bills matching the filters"""
    return bill_summary(_visible_bills(db, user, search, status, month, year, member_id))


@router.get("/bills/past-due", response_model=List[BillResponse])
def list_past_due_bills(db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    """
    Unpaid bills whose due date has passed.

    Read-only: bills stay pending until an admin marks them overdue.
    """
    repo = BillRepository(db)
    bills = repo.list_all() if user.role == Role.ADMIN else repo.list_for_member(user.id)
    return past_due_bills(bills, date_utils.today())


@router.post("/bills/generate", response_model=GenerateBillsResponse)
def generate_bills(
    body: GenerateBillsRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """
    Generate the month's maintenance bills for all active members.

    Flow:
    1. Load active members and bill ids already issued for the period
    2. Build the missing bills (pending, due on the configured day)
    3. Persist them and publish one INSERT event per bill
    4. Return only the newly created bills

    Running it again for the same month creates nothing.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    bill_repo = BillRepository(db)
    members = MemberRepository(db).list_by_status(MemberStatus.ACTIVE, role=Role.MEMBER)

    try:
        new_bills = generate_monthly_bills(
            body.month,
            body.year,
            members,
            bill_repo.ids_for_period(body.year, body.month),
            due_day=settings.bill_due_day,
        )
        records = bill_repo.create_bills(new_bills)
        db.commit()
    except IntegrityError as e:
        # A concurrent run inserted the same period first
        db.rollback()
        logging.warning(f"Duplicate bill during generation: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Bills for this period were generated concurrently")

    duration_ms = (time.time() - start_time) * 1000
    record_bill_generation(len(records))
    log_bill_generation(request_id, body.month, body.year, len(records), duration_ms)

    for record in records:
        background_tasks.add_task(events.publish, change_event("bills", INSERT, record.id))

    return GenerateBillsResponse(
        month=body.month,
        year=body.year,
        created=len(records),
        bills=[BillResponse.model_validate(r) for r in records],
    )


@router.post("/bills/{bill_id}/pay", response_model=BillResponse)
def pay_bill(
    bill_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    body: Optional[PaymentRequest] = None,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """
    Mark a bill paid.

    Members pay their own bills (method defaults to Online); admins record
    payments for anyone (method defaults to Manual). A receipt number is
    generated when none is given.
    """
    request_id = get_request_id(request)
    body = body or PaymentRequest()
    is_admin = user.role == Role.ADMIN

    repo = BillRepository(db)
    record = repo.get(bill_id)
    if record is None or (not is_admin and record.member_id != user.id):
        raise HTTPException(status_code=404, detail="Bill not found")

    default_method = DEFAULT_ADMIN_METHOD if is_admin else DEFAULT_MEMBER_METHOD

    try:
        payment = settle_bill(
            record.status,
            body.payment_method or default_method,
            receipt_number=body.receipt_number,
            paid_on=date_utils.today(),
            receipt_prefix=settings.receipt_prefix,
        )
        repo.mark_paid(record, payment)
        db.commit()
    except BillAlreadyPaidError as e:
        db.rollback()
        logging.warning(f"Duplicate payment: {e}", extra={"request_id": request_id, "bill_id": bill_id})
        raise HTTPException(status_code=409, detail=str(e))

    recorded_by = "admin" if is_admin else "member"
    record_payment(payment.payment_method, recorded_by)
    log_payment(request_id, bill_id, payment.payment_method, payment.receipt_number, recorded_by)

    background_tasks.add_task(events.publish, change_event("bills", UPDATE, bill_id))
    return record


@router.post("/bills/{bill_id}/mark-overdue", response_model=BillResponse)
def mark_bill_overdue(
    bill_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """Admin-assigned overdue status for a pending bill"""
    request_id = get_request_id(request)
    repo = BillRepository(db)
    record = repo.get(bill_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Bill not found")

    try:
        assign_overdue(record.status)
        repo.mark_overdue(record)
        db.commit()
    except InvalidTransitionError as e:
        db.rollback()
        logging.warning(f"Rejected overdue assignment: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    background_tasks.add_task(events.publish, change_event("bills", UPDATE, bill_id))
    return record
