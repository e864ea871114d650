"""Monthly maintenance bill generation"""

from typing import Iterable, List, Set

from society_portal.domain.exceptions import InvalidTransitionError
from society_portal.domain.models import Bill, BillStatus, Member, MemberStatus
from society_portal.utils.date_utils import due_date_for, month_name

MIN_BILLING_YEAR = 2000
MAX_BILLING_YEAR = 2100


def bill_id(member_id: str, year: int, month: int) -> str:
    """Deterministic bill identifier: one bill per member per month/year"""
    return f"{member_id}-{year}-{month}"


def bill_description(year: int, month: int) -> str:
    return f"Maintenance - {month_name(month)} {year}"


def validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    if not MIN_BILLING_YEAR <= year <= MAX_BILLING_YEAR:
        raise ValueError(f"Year must be between {MIN_BILLING_YEAR} and {MAX_BILLING_YEAR}, got {year}")


def generate_monthly_bills(
    month: int,
    year: int,
    members: Iterable[Member],
    existing_bill_ids: Set[str],
    due_day: int = 15,
) -> List[Bill]:
    """
    Build the bills still missing for a billing period.

    Only active members are billed. A member whose bill id for the period is
    already in ``existing_bill_ids`` is skipped, so running this twice for the
    same month never yields duplicates.

    Args:
        month: Billed month (1-12)
        year: Billed year
        members: Candidate members; inactive and pending ones are ignored
        existing_bill_ids: Ids of bills already persisted
        due_day: Day of month the bill falls due (default 15th)

    Returns:
        Newly created pending bills (empty if the period is fully billed)
    """
    validate_period(month, year)

    due_date = due_date_for(year, month, due_day)
    seen = set(existing_bill_ids)
    new_bills = []

    for member in members:
        if member.status != MemberStatus.ACTIVE:
            continue

        new_id = bill_id(member.id, year, month)
        if new_id in seen:
            continue

        seen.add(new_id)
        new_bills.append(
            Bill(
                id=new_id,
                member_id=member.id,
                month=month,
                year=year,
                amount=member.monthly_amount,
                due_date=due_date,
                status=BillStatus.PENDING,
                description=bill_description(year, month),
            )
        )

    return new_bills


def assign_overdue(status: BillStatus) -> BillStatus:
    """
    Manual overdue assignment. Only a pending bill can be marked overdue.

    Nothing marks bills overdue automatically; see ``statistics.past_due_bills``
    for a read-only view of unpaid bills past their due date.
    """
    if BillStatus(status) != BillStatus.PENDING:
        raise InvalidTransitionError(f"Cannot mark a {BillStatus(status).value} bill as overdue")
    return BillStatus.OVERDUE
