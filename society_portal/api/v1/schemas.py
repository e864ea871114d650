"""Pydantic schemas for API request/response validation"""

from datetime import date as date_type
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from society_portal.domain.models import (
    BillStatus,
    ExpenseCategory,
    MemberStatus,
    NoticePriority,
    NoticeStatus,
    NoticeType,
    Role,
)


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Members


class MemberCreate(BaseModel):
    """Request body for POST /v1/members (admin entry)"""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    flat_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    monthly_amount: Optional[Decimal] = Field(None, gt=0, description="Defaults to the standard assessment")
    status: MemberStatus = MemberStatus.ACTIVE
    role: Role = Role.MEMBER


class MemberRegistration(BaseModel):
    """Request body for POST /v1/members/register (self sign-up, awaits approval)"""

    user_id: str = Field(..., min_length=1, description="Identity issued by the auth provider")
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    flat_number: Optional[str] = None
    phone: Optional[str] = None


class MemberUpdate(BaseModel):
    """Request body for PATCH /v1/members/{id}; admin-only fields are rejected for self edits"""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    flat_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    monthly_amount: Optional[Decimal] = Field(None, gt=0)
    status: Optional[MemberStatus] = None

    @field_validator("name", "email", "monthly_amount", "status")
    @classmethod
    def reject_null(cls, value):
        # Omit the field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class MemberResponse(ORMModel):
    id: str
    name: str
    email: str
    flat_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    role: Role
    status: MemberStatus
    monthly_amount: float


# Bills


class GenerateBillsRequest(BaseModel):
    """Request body for POST /v1/bills/generate"""

    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)


class BillResponse(ORMModel):
    id: str
    member_id: str
    month: int
    year: int
    amount: float
    description: str
    due_date: date_type
    status: BillStatus
    payment_date: Optional[date_type] = None
    payment_method: Optional[str] = None
    receipt_number: Optional[str] = None


class GenerateBillsResponse(BaseModel):
    month: int
    year: int
    created: int
    bills: List[BillResponse]


class PaymentRequest(BaseModel):
    """Request body for POST /v1/bills/{id}/pay"""

    payment_method: Optional[str] = Field(None, min_length=1)
    receipt_number: Optional[str] = Field(None, min_length=1)


class BillSummaryResponse(ORMModel):
    total: int
    paid: int
    pending: int
    overdue: int
    total_amount: float
    collected_amount: float
    collection_rate: int


# Expenses


class ExpenseCreate(BaseModel):
    """Request body for POST /v1/expenses"""

    category: ExpenseCategory
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    date: date_type
    vendor: str = Field(..., min_length=1)
    receipt_url: Optional[str] = None


class ExpenseResponse(ORMModel):
    id: str
    category: ExpenseCategory
    description: str
    amount: float
    date: date_type
    vendor: str
    receipt_url: Optional[str] = None
    approved_by: str


class ExpenseSummaryResponse(ORMModel):
    total: float
    count: int
    current_month: float
    last_month: float
    monthly_change: float
    average_per_expense: float


# Notices


class NoticeCreate(BaseModel):
    """Request body for POST /v1/notices"""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    type: NoticeType = NoticeType.ANNOUNCEMENT
    priority: NoticePriority = NoticePriority.MEDIUM
    date: Optional[date_type] = None


class NoticeResponse(ORMModel):
    id: str
    title: str
    content: str
    type: NoticeType
    priority: NoticePriority
    date: date_type
    status: NoticeStatus


# Reports


class SocietyStatsResponse(ORMModel):
    total_members: int
    active_members: int
    pending_members: int
    total_collection: float
    total_expenses: float
    net_balance: float
    collection_rate: int
    overdue_count: int
    monthly_target: float


class MonthlyFinanceSchema(ORMModel):
    month: str
    income: float
    expenses: float
    profit: float


class YearlyReportResponse(ORMModel):
    year: int
    income: float
    expenses: float
    net: float
    months: List[MonthlyFinanceSchema]
    average_monthly_collection: float
    monthly_target: float
    achievement_rate: float


class CategoryTotal(BaseModel):
    category: str
    amount: float


class PaymentStatusResponse(ORMModel):
    paid: int
    pending: int
    overdue: int
    collection_efficiency: float


class DefaulterResponse(ORMModel):
    member_id: str
    name: str
    flat_number: Optional[str] = None
    overdue_amount: float
    overdue_bills: int
    last_paid: Optional[date_type] = None


class MemberSummaryResponse(ORMModel):
    """Response for GET /v1/reports/me"""

    member_id: str
    pending_amount: float
    next_due_date: Optional[date_type] = None
    unpaid_bills: List[BillResponse]
    recent_payments: List[BillResponse]
    notices: List[NoticeResponse] = []
