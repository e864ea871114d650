"""Dashboard statistics and financial report aggregation"""

from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from society_portal.domain.models import (
    Bill,
    BillStatus,
    BillSummary,
    Defaulter,
    Expense,
    ExpenseSummary,
    Member,
    MemberStatus,
    MemberSummary,
    MonthlyFinance,
    PaymentStatusBreakdown,
    SocietyStats,
    YearlyReport,
)
from society_portal.utils.date_utils import MONTH_ABBREVIATIONS, previous_month, same_month

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def _percent(part: int, whole: int) -> int:
    """Integer percentage, halves rounded up; 0 when there is nothing to divide"""
    if whole <= 0:
        return 0
    ratio = Decimal(part) * 100 / Decimal(whole)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _total(amounts: Iterable[Decimal]) -> Decimal:
    return sum((Decimal(a) for a in amounts), ZERO)


def bills_for_period(bills: Iterable[Bill], year: int, month: int) -> List[Bill]:
    return [b for b in bills if b.year == year and b.month == month]


def expenses_for_period(expenses: Iterable[Expense], year: int, month: int) -> List[Expense]:
    return [e for e in expenses if same_month(e.date, year, month)]


def collection_rate(bills: Sequence[Bill]) -> int:
    """Share of the given bills marked paid, as a whole percentage in [0, 100]"""
    paid = sum(1 for b in bills if b.status == BillStatus.PAID)
    return _percent(paid, len(bills))


def paid_total(bills: Iterable[Bill]) -> Decimal:
    return _total(b.amount for b in bills if b.status == BillStatus.PAID)


def expense_total(expenses: Iterable[Expense]) -> Decimal:
    return _total(e.amount for e in expenses)


def net_balance(bills: Iterable[Bill], expenses: Iterable[Expense]) -> Decimal:
    """Paid bill amounts minus expense amounts"""
    return paid_total(bills) - expense_total(expenses)


def monthly_target(active_members: int, standard_assessment: Decimal) -> Decimal:
    return Decimal(active_members) * Decimal(standard_assessment)


def society_stats(
    members: Sequence[Member],
    bills: Sequence[Bill],
    expenses: Sequence[Expense],
    today: date,
    standard_assessment: Decimal,
) -> SocietyStats:
    """
    Current-month figures for the admin dashboard.

    Overdue count is the number of members with at least one bill explicitly
    marked overdue; pending bills past their due date are not counted.
    """
    active = sum(1 for m in members if m.status == MemberStatus.ACTIVE)
    pending = sum(1 for m in members if m.status == MemberStatus.PENDING)

    current_bills = bills_for_period(bills, today.year, today.month)
    current_expenses = expenses_for_period(expenses, today.year, today.month)

    collection = paid_total(current_bills)
    spent = expense_total(current_expenses)

    overdue_member_ids = {b.member_id for b in bills if b.status == BillStatus.OVERDUE}
    overdue_count = sum(1 for m in members if m.id in overdue_member_ids)

    return SocietyStats(
        total_members=len(members),
        active_members=active,
        pending_members=pending,
        total_collection=collection,
        total_expenses=spent,
        net_balance=collection - spent,
        collection_rate=collection_rate(current_bills),
        overdue_count=overdue_count,
        monthly_target=monthly_target(active, standard_assessment),
    )


def yearly_report(
    bills: Sequence[Bill],
    expenses: Sequence[Expense],
    year: int,
    target: Decimal = ZERO,
) -> YearlyReport:
    """
    Yearly totals plus a Jan..Dec income/expense/profit series.

    Collection analytics compare the average monthly collection (income / 12)
    with ``target``, the expected monthly collection. Achievement rate is a
    percentage with one decimal, 0 when there is no target.
    """
    income_by_month: Dict[int, Decimal] = defaultdict(lambda: ZERO)
    expense_by_month: Dict[int, Decimal] = defaultdict(lambda: ZERO)

    for bill in bills:
        if bill.year == year and bill.status == BillStatus.PAID:
            income_by_month[bill.month] += Decimal(bill.amount)

    for expense in expenses:
        if expense.date.year == year:
            expense_by_month[expense.date.month] += Decimal(expense.amount)

    months = [
        MonthlyFinance(
            month=MONTH_ABBREVIATIONS[m - 1],
            income=income_by_month[m],
            expenses=expense_by_month[m],
            profit=income_by_month[m] - expense_by_month[m],
        )
        for m in range(1, 13)
    ]

    income = _total(m.income for m in months)
    spent = _total(m.expenses for m in months)

    average = (income / 12).quantize(CENTS, rounding=ROUND_HALF_UP)
    target = Decimal(target)
    achievement = ZERO
    if target > 0:
        achievement = (income / 12 / target * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    return YearlyReport(
        year=year,
        income=income,
        expenses=spent,
        net=income - spent,
        months=months,
        average_monthly_collection=average,
        monthly_target=target,
        achievement_rate=float(achievement),
    )


def expenses_by_category(expenses: Iterable[Expense], limit: Optional[int] = 5) -> List[Tuple[str, Decimal]]:
    """Category totals, largest first"""
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        key = getattr(expense.category, "value", expense.category)
        totals[key] += Decimal(expense.amount)

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit] if limit is not None else ranked


def payment_status_breakdown(bills: Sequence[Bill]) -> PaymentStatusBreakdown:
    counts = {status: 0 for status in BillStatus}
    for bill in bills:
        counts[BillStatus(bill.status)] += 1

    total = len(bills)
    efficiency = round(counts[BillStatus.PAID] * 100 / total, 1) if total else 0.0

    return PaymentStatusBreakdown(
        paid=counts[BillStatus.PAID],
        pending=counts[BillStatus.PENDING],
        overdue=counts[BillStatus.OVERDUE],
        collection_efficiency=efficiency,
    )


def bill_summary(bills: Sequence[Bill]) -> BillSummary:
    """Counts and amounts for a (usually filtered) set of bills"""
    breakdown = payment_status_breakdown(bills)
    return BillSummary(
        total=len(bills),
        paid=breakdown.paid,
        pending=breakdown.pending,
        overdue=breakdown.overdue,
        total_amount=_total(b.amount for b in bills),
        collected_amount=paid_total(bills),
        collection_rate=collection_rate(bills),
    )


def expense_summary(
    expenses: Sequence[Expense],
    today: date,
    filtered: Optional[Sequence[Expense]] = None,
) -> ExpenseSummary:
    """
    Expense totals with a month-over-month comparison.

    ``total`` and ``count`` describe ``filtered`` (defaults to all expenses);
    the current/last month figures always use the full set.
    """
    selected = expenses if filtered is None else filtered
    last_year, last_month = previous_month(today.year, today.month)

    current = expense_total(expenses_for_period(expenses, today.year, today.month))
    previous = expense_total(expenses_for_period(expenses, last_year, last_month))

    change = ZERO
    if previous > 0:
        change = ((current - previous) / previous * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    total = expense_total(selected)
    average = ZERO
    if selected:
        average = (total / len(selected)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    return ExpenseSummary(
        total=total,
        count=len(selected),
        current_month=current,
        last_month=previous,
        monthly_change=float(change),
        average_per_expense=average,
    )


def past_due_bills(bills: Iterable[Bill], today: date) -> List[Bill]:
    """Unpaid bills whose due date has passed, oldest first. Statuses are not changed."""
    overdue = [b for b in bills if b.status != BillStatus.PAID and b.due_date < today]
    return sorted(overdue, key=lambda b: (b.due_date, b.member_id))


def defaulters(members: Sequence[Member], bills: Sequence[Bill]) -> List[Defaulter]:
    """Members with bills explicitly marked overdue, largest arrears first"""
    by_member: Dict[str, List[Bill]] = defaultdict(list)
    for bill in bills:
        by_member[bill.member_id].append(bill)

    result = []
    for member in members:
        member_bills = by_member.get(member.id, [])
        overdue = [b for b in member_bills if b.status == BillStatus.OVERDUE]
        if not overdue:
            continue

        paid_dates = [b.payment_date for b in member_bills if b.status == BillStatus.PAID and b.payment_date]
        result.append(
            Defaulter(
                member_id=member.id,
                name=member.name,
                flat_number=member.flat_number,
                overdue_amount=_total(b.amount for b in overdue),
                overdue_bills=len(overdue),
                last_paid=max(paid_dates) if paid_dates else None,
            )
        )

    return sorted(result, key=lambda d: d.overdue_amount, reverse=True)


def member_summary(member_id: str, bills: Iterable[Bill], recent: int = 3) -> MemberSummary:
    """Outstanding amount, next due date and latest payments for one member"""
    own = [b for b in bills if b.member_id == member_id]

    unpaid = sorted((b for b in own if b.status != BillStatus.PAID), key=lambda b: b.due_date)
    paid = sorted(
        (b for b in own if b.status == BillStatus.PAID),
        key=lambda b: (b.payment_date or b.due_date),
        reverse=True,
    )

    return MemberSummary(
        member_id=member_id,
        pending_amount=_total(b.amount for b in unpaid),
        next_due_date=unpaid[0].due_date if unpaid else None,
        unpaid_bills=unpaid,
        recent_payments=paid[:recent],
    )
