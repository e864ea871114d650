"""Unit tests for monthly bill generation"""

import pytest
from datetime import date
from decimal import Decimal
from society_portal.domain.billing import (
    assign_overdue,
    bill_description,
    bill_id,
    generate_monthly_bills,
)
from society_portal.domain.exceptions import InvalidTransitionError
from society_portal.domain.models import BillStatus, Member


def _members(count: int, amount: str = "2500") -> list[Member]:
    return [
        Member(id=str(i), name=f"Member {i}", email=f"m{i}@email.com", flat_number=f"A-{i}", monthly_amount=Decimal(amount))
        for i in range(1, count + 1)
    ]


def test_bill_id_is_deterministic():
    """Same member and period always map to the same id"""
    assert bill_id("42", 2024, 3) == "42-2024-3"
    assert bill_id("42", 2024, 3) == bill_id("42", 2024, 3)
    assert bill_id("42", 2024, 3) != bill_id("42", 2024, 4)


def test_generate_bills_for_march_scenario():
    """3 active members at 2500 -> 3 pending bills due 2024-03-15"""
    bills = generate_monthly_bills(3, 2024, _members(3), existing_bill_ids=set())

    assert len(bills) == 3
    assert all(b.status == BillStatus.PENDING for b in bills)
    assert all(b.amount == Decimal("2500") for b in bills)
    assert all(b.due_date == date(2024, 3, 15) for b in bills)
    assert {b.id for b in bills} == {"1-2024-3", "2-2024-3", "3-2024-3"}
    assert bills[0].description == "Maintenance - March 2024"


def test_generate_bills_is_idempotent():
    """Re-running for the same period creates nothing"""
    members = _members(3)
    first = generate_monthly_bills(3, 2024, members, existing_bill_ids=set())
    second = generate_monthly_bills(3, 2024, members, existing_bill_ids={b.id for b in first})

    assert second == []


def test_generate_bills_only_fills_gaps():
    """A member added after the first run gets a bill; existing ones are untouched"""
    existing = {bill_id("1", 2024, 3), bill_id("2", 2024, 3)}
    bills = generate_monthly_bills(3, 2024, _members(3), existing_bill_ids=existing)

    assert [b.member_id for b in bills] == ["3"]


def test_generate_bills_skips_non_active_members(sample_members):
    bills = generate_monthly_bills(3, 2024, sample_members, existing_bill_ids=set())

    assert {b.member_id for b in bills} == {"1", "2", "3"}


def test_generate_bills_uses_member_assessment(sample_members):
    bills = generate_monthly_bills(3, 2024, sample_members, existing_bill_ids=set())

    amounts = {b.member_id: b.amount for b in bills}
    assert amounts["3"] == Decimal("3000")


def test_generate_bills_no_members():
    assert generate_monthly_bills(3, 2024, [], existing_bill_ids=set()) == []


def test_generate_bills_duplicate_member_in_input():
    """The same member listed twice still yields a single bill"""
    member = _members(1)[0]
    bills = generate_monthly_bills(3, 2024, [member, member], existing_bill_ids=set())

    assert len(bills) == 1


def test_generate_bills_due_day_clamped_to_month_end():
    bills = generate_monthly_bills(2, 2023, _members(1), existing_bill_ids=set(), due_day=31)

    assert bills[0].due_date == date(2023, 2, 28)


@pytest.mark.parametrize("month,year", [(0, 2024), (13, 2024), (3, 1999), (3, 2101)])
def test_generate_bills_rejects_invalid_period(month, year):
    with pytest.raises(ValueError):
        generate_monthly_bills(month, year, _members(1), existing_bill_ids=set())


def test_bill_description_uses_month_name():
    assert bill_description(2024, 12) == "Maintenance - December 2024"


def test_assign_overdue_from_pending():
    assert assign_overdue(BillStatus.PENDING) == BillStatus.OVERDUE


@pytest.mark.parametrize("status", [BillStatus.PAID, BillStatus.OVERDUE])
def test_assign_overdue_rejects_other_statuses(status):
    with pytest.raises(InvalidTransitionError):
        assign_overdue(status)
