"""Member directory and approval endpoints"""

import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from society_portal.api.dependencies import (
    get_change_event_client,
    get_current_user,
    get_request_id,
    require_admin,
)
from society_portal.api.v1.schemas import MemberCreate, MemberRegistration, MemberResponse, MemberUpdate
from society_portal.config import settings
from society_portal.domain.approvals import APPROVE, REJECT, apply_decision, change_status
from society_portal.domain.exceptions import InvalidTransitionError
from society_portal.domain.filters import filter_members
from society_portal.domain.models import MemberStatus, Role
from society_portal.infrastructure.clients.change_events import (
    DELETE,
    INSERT,
    UPDATE,
    ChangeEventClient,
    change_event,
)
from society_portal.infrastructure.database.models import Profile
from society_portal.infrastructure.database.repositories import MemberRepository
from society_portal.infrastructure.database.session import get_db
from society_portal.infrastructure.observability.logging import log_approval
from society_portal.infrastructure.observability.metrics import record_decision

router = APIRouter()

SELF_EDITABLE_FIELDS = {"name", "flat_number", "phone", "address"}


def _get_or_404(repo: MemberRepository, member_id: str) -> Profile:
    profile = repo.get(member_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return profile


@router.get("/members", response_model=List[MemberResponse])
def list_members(
    search: str = Query("", description="Matches name, flat number or email"),
    status: Optional[MemberStatus] = Query(None),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    """Member directory, newest first"""
    return filter_members(MemberRepository(db).list_all(), search=search, status=status)


@router.get("/members/pending", response_model=List[MemberResponse])
def list_pending_members(db: Session = Depends(get_db), admin: Profile = Depends(require_admin)):
    """Registrations awaiting approval, newest first"""
    return MemberRepository(db).list_by_status(MemberStatus.PENDING)


@router.get("/members/me", response_model=MemberResponse)
def get_own_profile(user: Profile = Depends(get_current_user)):
    return user


@router.get("/members/{member_id}", response_model=MemberResponse)
def get_member(member_id: str, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    if user.role != Role.ADMIN and user.id != member_id:
        raise HTTPException(status_code=403, detail="Members can only view their own profile")
    return _get_or_404(MemberRepository(db), member_id)


@router.post("/members", response_model=MemberResponse, status_code=201)
def create_member(
    body: MemberCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """Admin entry of a member profile"""
    profile = MemberRepository(db).create(
        name=body.name,
        email=body.email,
        flat_number=body.flat_number,
        phone=body.phone,
        address=body.address,
        monthly_amount=body.monthly_amount or settings.standard_assessment,
        status=body.status,
        role=body.role,
    )
    db.commit()

    background_tasks.add_task(events.publish, change_event("profiles", INSERT, profile.id))
    return profile


@router.post("/members/register", response_model=MemberResponse, status_code=201)
def register_member(
    body: MemberRegistration,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """
    Self-registration after sign-up.

    The profile starts as a pending member and cannot use the API until an
    admin approves it.
    """
    repo = MemberRepository(db)
    if repo.get(body.user_id) is not None:
        raise HTTPException(status_code=409, detail="Profile already exists")

    try:
        profile = repo.create(
            member_id=body.user_id,
            name=body.name,
            email=body.email,
            flat_number=body.flat_number,
            phone=body.phone,
            monthly_amount=settings.standard_assessment,
            status=MemberStatus.PENDING,
            role=Role.MEMBER,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Profile already exists")

    background_tasks.add_task(events.publish, change_event("profiles", INSERT, profile.id))
    return profile


@router.patch("/members/{member_id}", response_model=MemberResponse)
def update_member(
    member_id: str,
    body: MemberUpdate,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """
    Edit a profile.

    Admins may edit any field. Members may edit their own name, flat number,
    phone and address only.
    """
    request_id = get_request_id(request)
    changes = body.model_dump(exclude_unset=True)

    if user.role != Role.ADMIN:
        if user.id != member_id:
            raise HTTPException(status_code=403, detail="Members can only edit their own profile")
        forbidden = set(changes) - SELF_EDITABLE_FIELDS
        if forbidden:
            raise HTTPException(status_code=403, detail=f"Fields not editable: {', '.join(sorted(forbidden))}")

    repo = MemberRepository(db)
    profile = _get_or_404(repo, member_id)

    try:
        if "status" in changes:
            changes["status"] = change_status(profile.status, changes["status"])
        repo.update(profile, **changes)
        db.commit()
    except InvalidTransitionError as e:
        db.rollback()
        logging.warning(f"Rejected status change: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    background_tasks.add_task(events.publish, change_event("profiles", UPDATE, profile.id))
    return profile


@router.delete("/members/{member_id}", status_code=204)
def delete_member(
    member_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """Remove a member and their bills"""
    repo = MemberRepository(db)
    repo.delete(_get_or_404(repo, member_id))
    db.commit()

    background_tasks.add_task(events.publish, change_event("profiles", DELETE, member_id))
    return Response(status_code=204)


def _decide(
    action: str,
    member_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session,
    admin: Profile,
    events: ChangeEventClient,
) -> Profile:
    request_id = get_request_id(request)
    repo = MemberRepository(db)
    profile = _get_or_404(repo, member_id)

    try:
        repo.update(profile, status=apply_decision(profile.status, action))
        db.commit()
    except InvalidTransitionError as e:
        db.rollback()
        logging.warning(f"Rejected membership decision: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    approved = action == APPROVE
    record_decision(approved)
    log_approval(request_id, member_id, "approved" if approved else "rejected", admin.id)

    background_tasks.add_task(events.publish, change_event("profiles", UPDATE, member_id))
    return profile


@router.post("/members/{member_id}/approve", response_model=MemberResponse)
def approve_member(
    member_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """pending -> active"""
    return _decide(APPROVE, member_id, request, background_tasks, db, admin, events)


@router.post("/members/{member_id}/reject", response_model=MemberResponse)
def reject_member(
    member_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    """pending -> inactive"""
    return _decide(REJECT, member_id, request, background_tasks, db, admin, events)
