"""Member approval workflow"""

from typing import Dict, Tuple

from society_portal.domain.exceptions import InvalidTransitionError
from society_portal.domain.models import MemberStatus

APPROVE = "approve"
REJECT = "reject"

# (current status, action) -> next status
_TRANSITIONS: Dict[Tuple[MemberStatus, str], MemberStatus] = {
    (MemberStatus.PENDING, APPROVE): MemberStatus.ACTIVE,
    (MemberStatus.PENDING, REJECT): MemberStatus.INACTIVE,
}


def apply_decision(status: MemberStatus, action: str) -> MemberStatus:
    """
    Resolve an approval decision for a member.

    Raises:
        InvalidTransitionError: If the member is not awaiting approval
    """
    try:
        return _TRANSITIONS[(MemberStatus(status), action)]
    except KeyError:
        raise InvalidTransitionError(
            f"Cannot {action} a member whose status is {MemberStatus(status).value}"
        ) from None


def change_status(current: MemberStatus, requested: MemberStatus) -> MemberStatus:
    """Direct admin status edit: active and inactive may swap, pending is never re-entered"""
    current = MemberStatus(current)
    requested = MemberStatus(requested)

    if requested == current:
        return current
    if requested == MemberStatus.PENDING:
        raise InvalidTransitionError("Members cannot be moved back to pending")
    if current == MemberStatus.PENDING:
        raise InvalidTransitionError("Pending members must be approved or rejected")
    return requested
