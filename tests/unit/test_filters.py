"""Unit tests for listing search and filters"""

from society_portal.domain.filters import filter_bills, filter_expenses, filter_members
from society_portal.domain.models import BillStatus, ExpenseCategory, MemberStatus


def test_filter_members_by_search(sample_members):
    assert [m.id for m in filter_members(sample_members, search="priya")] == ["2"]
    assert [m.id for m in filter_members(sample_members, search="b-")] == ["2", "5"]


def test_filter_members_by_status(sample_members):
    assert [m.id for m in filter_members(sample_members, status=MemberStatus.PENDING)] == ["4"]
    assert [m.id for m in filter_members(sample_members, status="inactive")] == ["5"]


def test_filter_members_no_filters(sample_members):
    assert filter_members(sample_members) == sample_members


def test_filter_bills_by_member_name(sample_members, sample_bills):
    members_by_id = {m.id: m for m in sample_members}

    result = filter_bills(sample_bills, members_by_id, search="rajesh")

    assert [b.id for b in result] == ["1-2024-2", "1-2024-3"]


def test_filter_bills_by_month_name(sample_members, sample_bills):
    members_by_id = {m.id: m for m in sample_members}

    result = filter_bills(sample_bills, members_by_id, search="feb")

    assert [b.id for b in result] == ["1-2024-2"]


def test_filter_bills_by_status_and_period(sample_members, sample_bills):
    members_by_id = {m.id: m for m in sample_members}

    assert [b.id for b in filter_bills(sample_bills, members_by_id, status=BillStatus.OVERDUE)] == ["3-2024-3"]
    assert len(filter_bills(sample_bills, members_by_id, month=3, year=2024)) == 3
    assert filter_bills(sample_bills, members_by_id, year=2023) == []


def test_filter_bills_by_member(sample_bills):
    assert [b.id for b in filter_bills(sample_bills, {}, member_id="2")] == ["2-2024-3"]


def test_filter_expenses(sample_expenses):
    assert len(filter_expenses(sample_expenses, search="guard")) == 1
    assert len(filter_expenses(sample_expenses, search="electricity board")) == 2
    assert len(filter_expenses(sample_expenses, category=ExpenseCategory.ELECTRICITY)) == 2
    assert len(filter_expenses(sample_expenses, category="electricity", month=2)) == 1
