"""Dependency injection for FastAPI endpoints"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from society_portal.domain.models import MemberStatus, Role
from society_portal.infrastructure.clients.change_events import ChangeEventClient
from society_portal.infrastructure.database.models import Profile
from society_portal.infrastructure.database.repositories import MemberRepository
from society_portal.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_change_event_client() -> ChangeEventClient:
    """Provide change event webhook client instance"""
    return ChangeEventClient()


def get_current_user(
    x_user_id: Optional[str] = Header(None, description="User id set by the authenticating proxy"),
    db: Session = Depends(get_db),
) -> Profile:
    """Resolve the caller's profile; only active profiles may use the API"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    profile = MemberRepository(db).get(x_user_id)
    if profile is None:
        raise HTTPException(status_code=403, detail="Unknown user")
    if profile.status != MemberStatus.ACTIVE:
        raise HTTPException(status_code=403, detail="Membership is not active")
    return profile


def require_admin(user: Profile = Depends(get_current_user)) -> Profile:
    if user.role != Role.ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
