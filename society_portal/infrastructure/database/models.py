"""SQLAlchemy ORM models for the society tables"""

import uuid
from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from society_portal.domain.models import (
    BillStatus,
    ExpenseCategory,
    MemberStatus,
    NoticePriority,
    NoticeStatus,
    NoticeType,
    Role,
)

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def _enum(enum_cls):
    """Store enum values ('paid'), not member names ('PAID')"""
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class Profile(Base):
    """Member profile; id is the authenticated user id"""

    __tablename__ = "profiles"

    id = Column(Text, primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, index=True)
    flat_number = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    role = Column(_enum(Role), nullable=False, default=Role.MEMBER)
    status = Column(_enum(MemberStatus), nullable=False, default=MemberStatus.PENDING, index=True)
    monthly_amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    bills = relationship("BillRecord", back_populates="member", cascade="all, delete-orphan")


class BillRecord(Base):
    """Monthly maintenance bill; id is '{member_id}-{year}-{month}'"""

    __tablename__ = "bills"

    id = Column(Text, primary_key=True)
    member_id = Column(Text, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False, default="")
    due_date = Column(Date, nullable=False)
    status = Column(_enum(BillStatus), nullable=False, default=BillStatus.PENDING, index=True)
    payment_date = Column(Date, nullable=True)
    payment_method = Column(Text, nullable=True)
    receipt_number = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    member = relationship("Profile", back_populates="bills")


class ExpenseRecord(Base):
    """Society expense, immutable once recorded"""

    __tablename__ = "expenses"

    id = Column(Text, primary_key=True, default=new_id)
    category = Column(_enum(ExpenseCategory), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    vendor = Column(Text, nullable=False)
    receipt_url = Column(Text, nullable=True)
    approved_by = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class NoticeRecord(Base):
    """Notice board entry"""

    __tablename__ = "notices"

    id = Column(Text, primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    type = Column(_enum(NoticeType), nullable=False, default=NoticeType.ANNOUNCEMENT)
    priority = Column(_enum(NoticePriority), nullable=False, default=NoticePriority.MEDIUM)
    date = Column(Date, nullable=False)
    status = Column(_enum(NoticeStatus), nullable=False, default=NoticeStatus.ACTIVE, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
