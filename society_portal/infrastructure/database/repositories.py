"""Data access layer for society entities"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from society_portal.domain.models import (
    Bill,
    BillStatus,
    Expense,
    MemberStatus,
    NoticePriority,
    NoticeStatus,
    NoticeType,
    Payment,
    Role,
)
from society_portal.infrastructure.database.models import BillRecord, ExpenseRecord, NoticeRecord, Profile, new_id
from society_portal.utils import date_utils


class MemberRepository:
    """Repository for member profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, member_id: str) -> Optional[Profile]:
        return self.db.get(Profile, member_id)

    def list_all(self, role: Optional[Role] = None) -> List[Profile]:
        """All profiles (optionally of one role), newest first"""
        query = self.db.query(Profile)
        if role is not None:
            query = query.filter(Profile.role == role)
        return query.order_by(Profile.created_at.desc(), Profile.id).all()

    def list_by_status(self, status: MemberStatus, role: Optional[Role] = None) -> List[Profile]:
        query = self.db.query(Profile).filter(Profile.status == status)
        if role is not None:
            query = query.filter(Profile.role == role)
        return query.order_by(Profile.created_at.desc(), Profile.id).all()

    def create(
        self,
        name: str,
        email: str,
        monthly_amount: Decimal,
        status: MemberStatus = MemberStatus.PENDING,
        role: Role = Role.MEMBER,
        flat_number: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        member_id: Optional[str] = None,
    ) -> Profile:
        """Persist a new profile"""
        profile = Profile(
            id=member_id or new_id(),
            name=name,
            email=email,
            flat_number=flat_number,
            phone=phone,
            address=address,
            role=role,
            status=status,
            monthly_amount=monthly_amount,
        )
        self.db.add(profile)
        self.db.flush()  # Write row without committing
        return profile

    def update(self, profile: Profile, **fields) -> Profile:
        for name, value in fields.items():
            setattr(profile, name, value)
        self.db.flush()
        return profile

    def delete(self, profile: Profile) -> None:
        self.db.delete(profile)
        self.db.flush()


class BillRepository:
    """Repository for maintenance bills"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, bill_id: str) -> Optional[BillRecord]:
        return self.db.get(BillRecord, bill_id)

    def list_all(self) -> List[BillRecord]:
        return (
            self.db.query(BillRecord)
            .order_by(BillRecord.year.desc(), BillRecord.month.desc(), BillRecord.member_id)
            .all()
        )

    def list_for_member(self, member_id: str) -> List[BillRecord]:
        return (
            self.db.query(BillRecord)
            .filter(BillRecord.member_id == member_id)
            .order_by(BillRecord.year.desc(), BillRecord.month.desc())
            .all()
        )

    def ids_for_period(self, year: int, month: int) -> Set[str]:
        """Ids of bills already generated for a billing period"""
        rows = (
            self.db.query(BillRecord.id)
            .filter(BillRecord.year == year, BillRecord.month == month)
            .all()
        )
        return {row[0] for row in rows}

    def create_bills(self, bills: Iterable[Bill]) -> List[BillRecord]:
        """Persist generated bills"""
        records = [
            BillRecord(
                id=bill.id,
                member_id=bill.member_id,
                month=bill.month,
                year=bill.year,
                amount=bill.amount,
                description=bill.description,
                due_date=bill.due_date,
                status=bill.status,
            )
            for bill in bills
        ]
        self.db.add_all(records)
        self.db.flush()
        return records

    def mark_paid(self, record: BillRecord, payment: Payment) -> BillRecord:
        record.status = BillStatus.PAID
        record.payment_date = payment.payment_date
        record.payment_method = payment.payment_method
        record.receipt_number = payment.receipt_number
        self.db.flush()
        return record

    def mark_overdue(self, record: BillRecord) -> BillRecord:
        record.status = BillStatus.OVERDUE
        self.db.flush()
        return record


class ExpenseRepository:
    """Repository for society expenses"""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[ExpenseRecord]:
        """All expenses, most recent first"""
        return self.db.query(ExpenseRecord).order_by(ExpenseRecord.date.desc(), ExpenseRecord.id).all()

    def create(self, expense: Expense, receipt_url: Optional[str] = None) -> ExpenseRecord:
        record = ExpenseRecord(
            id=expense.id or new_id(),
            category=expense.category,
            description=expense.description,
            amount=expense.amount,
            date=expense.date,
            vendor=expense.vendor,
            receipt_url=receipt_url,
            approved_by=expense.approved_by,
        )
        self.db.add(record)
        self.db.flush()
        return record


class NoticeRepository:
    """Repository for notice board entries"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, notice_id: str) -> Optional[NoticeRecord]:
        return self.db.get(NoticeRecord, notice_id)

    def list_all(self, include_archived: bool = False) -> List[NoticeRecord]:
        """Notices, most recent first"""
        query = self.db.query(NoticeRecord)
        if not include_archived:
            query = query.filter(NoticeRecord.status == NoticeStatus.ACTIVE)
        return query.order_by(NoticeRecord.date.desc(), NoticeRecord.id).all()

    def create(
        self,
        title: str,
        content: str,
        notice_type: NoticeType,
        priority: NoticePriority,
        notice_date: Optional[date] = None,
        notice_id: Optional[str] = None,
    ) -> NoticeRecord:
        record = NoticeRecord(
            id=notice_id or new_id(),
            title=title,
            content=content,
            type=notice_type,
            priority=priority,
            date=notice_date or date_utils.today(),
            status=NoticeStatus.ACTIVE,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def archive(self, record: NoticeRecord) -> NoticeRecord:
        record.status = NoticeStatus.ARCHIVED
        self.db.flush()
        return record
