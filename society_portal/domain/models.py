"""Domain models - pure Python dataclasses and enums representing society entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class Role(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"


class MemberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class BillStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class ExpenseCategory(str, Enum):
    ELECTRICITY = "electricity"
    SECURITY = "security"
    WATER = "water"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"
    GARBAGE = "garbage"
    STAFF = "staff"
    OTHER = "other"


class NoticeType(str, Enum):
    MAINTENANCE = "maintenance"
    MEETING = "meeting"
    ANNOUNCEMENT = "announcement"
    EMERGENCY = "emergency"


class NoticePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NoticeStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


@dataclass
class Member:
    """Society member profile"""

    id: str
    name: str
    email: str
    flat_number: Optional[str]
    monthly_amount: Decimal
    status: MemberStatus = MemberStatus.ACTIVE
    role: Role = Role.MEMBER
    phone: Optional[str] = None


@dataclass
class Bill:
    """Monthly maintenance charge owed by one member"""

    id: str
    member_id: str
    month: int
    year: int
    amount: Decimal
    due_date: date
    status: BillStatus = BillStatus.PENDING
    description: str = ""
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    receipt_number: Optional[str] = None


@dataclass
class Expense:
    """Society-level expenditure"""

    category: ExpenseCategory
    description: str
    amount: Decimal
    date: date
    vendor: str
    approved_by: str = "Admin"
    id: Optional[str] = None


@dataclass
class Payment:
    """Settlement details applied to a bill"""

    payment_date: date
    payment_method: str
    receipt_number: str


@dataclass
class SocietyStats:
    """Current-month dashboard figures"""

    total_members: int
    active_members: int
    pending_members: int
    total_collection: Decimal
    total_expenses: Decimal
    net_balance: Decimal
    collection_rate: int
    overdue_count: int
    monthly_target: Decimal


@dataclass
class MonthlyFinance:
    """Income/expense totals for one calendar month"""

    month: str
    income: Decimal
    expenses: Decimal
    profit: Decimal


@dataclass
class YearlyReport:
    year: int
    income: Decimal
    expenses: Decimal
    net: Decimal
    months: List[MonthlyFinance] = field(default_factory=list)
    average_monthly_collection: Decimal = Decimal("0")
    monthly_target: Decimal = Decimal("0")
    achievement_rate: float = 0.0


@dataclass
class PaymentStatusBreakdown:
    paid: int
    pending: int
    overdue: int
    collection_efficiency: float


@dataclass
class BillSummary:
    total: int
    paid: int
    pending: int
    overdue: int
    total_amount: Decimal
    collected_amount: Decimal
    collection_rate: int


@dataclass
class ExpenseSummary:
    total: Decimal
    count: int
    current_month: Decimal
    last_month: Decimal
    monthly_change: float
    average_per_expense: Decimal = Decimal("0")


@dataclass
class Defaulter:
    member_id: str
    name: str
    flat_number: Optional[str]
    overdue_amount: Decimal
    overdue_bills: int
    last_paid: Optional[date]


@dataclass
class MemberSummary:
    """What a single member sees on their dashboard"""

    member_id: str
    pending_amount: Decimal
    next_due_date: Optional[date]
    unpaid_bills: List[Bill] = field(default_factory=list)
    recent_payments: List[Bill] = field(default_factory=list)
