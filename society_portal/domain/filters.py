"""Search and filter helpers for member, bill and expense listings"""

from typing import Dict, Iterable, List, Optional

from society_portal.domain.models import Bill, Expense, Member
from society_portal.utils.date_utils import month_name


def _contains(value: Optional[str], term: str) -> bool:
    return term in (value or "").lower()


def _value(field) -> str:
    return getattr(field, "value", field)


def filter_members(
    members: Iterable[Member],
    search: str = "",
    status: Optional[str] = None,
) -> List[Member]:
    """Case-insensitive match on name, flat number or email"""
    term = search.strip().lower()
    return [
        m
        for m in members
        if (not term or _contains(m.name, term) or _contains(m.flat_number, term) or _contains(m.email, term))
        and (status is None or _value(m.status) == _value(status))
    ]


def filter_bills(
    bills: Iterable[Bill],
    members_by_id: Dict[str, Member],
    search: str = "",
    status: Optional[str] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    member_id: Optional[str] = None,
) -> List[Bill]:
    """Search matches the bill's member name, member flat number or month name"""
    term = search.strip().lower()
    result = []

    for bill in bills:
        if status is not None and _value(bill.status) != _value(status):
            continue
        if month is not None and bill.month != month:
            continue
        if year is not None and bill.year != year:
            continue
        if member_id is not None and bill.member_id != member_id:
            continue

        if term:
            member = members_by_id.get(bill.member_id)
            name = member.name if member else ""
            flat = member.flat_number if member else ""
            if not (_contains(name, term) or _contains(flat, term) or _contains(month_name(bill.month), term)):
                continue

        result.append(bill)

    return result


def filter_expenses(
    expenses: Iterable[Expense],
    search: str = "",
    category: Optional[str] = None,
    month: Optional[int] = None,
) -> List[Expense]:
    """Search matches description, vendor or category"""
    term = search.strip().lower()
    return [
        e
        for e in expenses
        if (
            not term
            or _contains(e.description, term)
            or _contains(e.vendor, term)
            or _contains(_value(e.category), term)
        )
        and (category is None or _value(e.category) == _value(category))
        and (month is None or e.date.month == month)
    ]
