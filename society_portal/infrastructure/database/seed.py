"""Demo data for DATA_MODE=demo"""

import logging
import random
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from society_portal.domain.billing import bill_description, bill_id
from society_portal.domain.models import (
    BillStatus,
    ExpenseCategory,
    MemberStatus,
    NoticePriority,
    NoticeStatus,
    NoticeType,
    Role,
)
from society_portal.domain.payments import generate_receipt_number
from society_portal.infrastructure.database.models import Base, BillRecord, ExpenseRecord, NoticeRecord, Profile
from society_portal.utils import date_utils

logger = logging.getLogger(__name__)

DEMO_ADMIN_ID = "admin"
DEMO_ASSESSMENT = Decimal("2500")

DEMO_MEMBERS = [
    ("1", "Rajesh Kumar", "rajesh.kumar@email.com", "A-201", "+91-9876543210"),
    ("2", "Priya Sharma", "priya.sharma@email.com", "B-105", "+91-9876543211"),
    ("3", "Amit Singh", "amit.singh@email.com", "C-303", "+91-9876543212"),
    ("4", "Sunita Devi", "sunita.devi@email.com", "A-102", "+91-9876543213"),
    ("5", "Rohit Gupta", "rohit.gupta@email.com", "B-207", "+91-9876543214"),
    ("6", "Neha Jain", "neha.jain@email.com", "C-401", "+91-9876543215"),
]

# member id -> number of most recent past months left unpaid and marked overdue
DEMO_ARREARS = {"5": 2, "6": 1}

DEMO_EXPENSES = [
    (ExpenseCategory.ELECTRICITY, "Monthly electricity bill for common areas", "15000", 10, "State Electricity Board"),
    (ExpenseCategory.SECURITY, "Security guard salary", "25000", 8, "Guardian Security Services"),
    (ExpenseCategory.MAINTENANCE, "Lift maintenance and repairs", "8500", 5, "Quick Fix Solutions"),
    (ExpenseCategory.CLEANING, "Housekeeping services", "12000", 3, "Clean & Green Services"),
    (ExpenseCategory.WATER, "Water tanker and pump maintenance", "6500", 12, "Aqua Solutions"),
]

DEMO_NOTICES = [
    (
        "Water Supply Maintenance",
        "Water supply will be interrupted on the 15th from 10 AM to 2 PM for maintenance work.",
        NoticeType.MAINTENANCE,
        NoticePriority.HIGH,
        10,
    ),
    (
        "Society Annual Meeting",
        "Annual general meeting will be held on the 20th at 6 PM in the community hall.",
        NoticeType.MEETING,
        NoticePriority.MEDIUM,
        8,
    ),
    (
        "New Parking Rules",
        "New parking guidelines have been implemented. Please ensure proper parking in designated areas.",
        NoticeType.ANNOUNCEMENT,
        NoticePriority.MEDIUM,
        5,
    ),
]


def seed_demo_data(db: Session, today: Optional[date] = None, rng: Optional[random.Random] = None) -> int:
    """
    Populate an empty store with a small society.

    Bills exist for every month of the current year up to ``today``: earlier
    months are paid except the arrears in DEMO_ARREARS (marked overdue), the
    current month is pending. Expenses and notices are dated this month.

    Returns:
        Number of bills created
    """
    today = today or date_utils.today()
    rng = rng or random.Random(2024)

    db.add(
        Profile(
            id=DEMO_ADMIN_ID,
            name="Society Admin",
            email="admin@society.local",
            role=Role.ADMIN,
            status=MemberStatus.ACTIVE,
            monthly_amount=DEMO_ASSESSMENT,
        )
    )

    bills = []
    for member_id, name, email, flat, phone in DEMO_MEMBERS:
        db.add(
            Profile(
                id=member_id,
                name=name,
                email=email,
                flat_number=flat,
                phone=phone,
                role=Role.MEMBER,
                status=MemberStatus.ACTIVE,
                monthly_amount=DEMO_ASSESSMENT,
            )
        )

        for month in range(1, today.month + 1):
            due_date = date_utils.due_date_for(today.year, month)
            bill = BillRecord(
                id=bill_id(member_id, today.year, month),
                member_id=member_id,
                month=month,
                year=today.year,
                amount=DEMO_ASSESSMENT,
                description=bill_description(today.year, month),
                due_date=due_date,
                status=BillStatus.PENDING,
            )

            if month < today.month:
                if month >= today.month - DEMO_ARREARS.get(member_id, 0):
                    bill.status = BillStatus.OVERDUE
                else:
                    bill.status = BillStatus.PAID
                    bill.payment_date = due_date.replace(day=rng.randint(1, 28))
                    bill.payment_method = "Online" if rng.random() > 0.5 else "Cash"
                    bill.receipt_number = generate_receipt_number(rng=rng)

            bills.append(bill)

    db.flush()  # Profiles before their bills
    db.add_all(bills)

    for category, description, amount, day, vendor in DEMO_EXPENSES:
        db.add(
            ExpenseRecord(
                category=category,
                description=description,
                amount=Decimal(amount),
                date=today.replace(day=min(day, today.day)),
                vendor=vendor,
                approved_by="Admin",
            )
        )

    for title, content, notice_type, priority, day in DEMO_NOTICES:
        db.add(
            NoticeRecord(
                title=title,
                content=content,
                type=notice_type,
                priority=priority,
                date=today.replace(day=min(day, today.day)),
                status=NoticeStatus.ACTIVE,
            )
        )

    db.commit()
    return len(bills)


def init_demo_store(engine: Engine) -> None:
    """Create the schema and seed it once"""
    Base.metadata.create_all(bind=engine)

    with Session(bind=engine) as db:
        if db.query(Profile).first() is not None:
            return
        created = seed_demo_data(db)
        logger.info("Demo store seeded", extra={"bills": created, "members": len(DEMO_MEMBERS)})
