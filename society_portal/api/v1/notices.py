"""Notice board endpoints"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from society_portal.api.dependencies import get_change_event_client, get_current_user, require_admin
from society_portal.api.v1.schemas import NoticeCreate, NoticeResponse
from society_portal.domain.models import Role
from society_portal.infrastructure.clients.change_events import INSERT, UPDATE, ChangeEventClient, change_event
from society_portal.infrastructure.database.models import Profile
from society_portal.infrastructure.database.repositories import NoticeRepository
from society_portal.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/notices", response_model=List[NoticeResponse])
def list_notices(
    include_archived: bool = Query(False, description="Admins only"),
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """Active notices, most recent first"""
    show_archived = include_archived and user.role == Role.ADMIN
    return NoticeRepository(db).list_all(include_archived=show_archived)


@router.post("/notices", response_model=NoticeResponse, status_code=201)
def create_notice(
    body: NoticeCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    record = NoticeRepository(db).create(
        title=body.title,
        content=body.content,
        notice_type=body.type,
        priority=body.priority,
        notice_date=body.date,
    )
    db.commit()

    background_tasks.add_task(events.publish, change_event("notices", INSERT, record.id))
    return record


@router.post("/notices/{notice_id}/archive", response_model=NoticeResponse)
def archive_notice(
    notice_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    events: ChangeEventClient = Depends(get_change_event_client),
):
    repo = NoticeRepository(db)
    record = repo.get(notice_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Notice not found")

    repo.archive(record)
    db.commit()

    background_tasks.add_task(events.publish, change_event("notices", UPDATE, notice_id))
    return record
