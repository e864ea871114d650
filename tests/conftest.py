"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from society_portal.api.main import create_app
from society_portal.domain.models import Bill, BillStatus, Expense, ExpenseCategory, Member, MemberStatus, Role
from society_portal.infrastructure.database.models import Base, Profile
from society_portal.infrastructure.database.session import build_engine, get_db
from society_portal.utils import date_utils


# Test database
engine = build_engine("sqlite://")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2024, 3, 20)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def fixed_today(monkeypatch) -> date:
    """Pin the service clock to 2024-03-20"""
    monkeypatch.setattr(date_utils, "today", lambda: TODAY)
    return TODAY


@pytest.fixture
def make_profile(db: Session) -> Callable[..., Profile]:
    def _make(
        member_id: str,
        name: str = "Member",
        role: Role = Role.MEMBER,
        status: MemberStatus = MemberStatus.ACTIVE,
        flat_number: str = "A-101",
        monthly_amount: Decimal = Decimal("2500"),
    ) -> Profile:
        profile = Profile(
            id=member_id,
            name=name,
            email=f"{member_id}@society.test",
            flat_number=flat_number,
            role=role,
            status=status,
            monthly_amount=monthly_amount,
        )
        db.add(profile)
        db.commit()
        return profile

    return _make


@pytest.fixture
def admin(make_profile) -> Profile:
    return make_profile("admin-1", name="Society Admin", role=Role.ADMIN, flat_number=None)


@pytest.fixture
def admin_headers(admin: Profile) -> Dict[str, str]:
    return {"X-User-Id": admin.id}


@pytest.fixture
def active_members(make_profile) -> list[Profile]:
    """Three active members assessed 2500 each"""
    return [
        make_profile("m1", name="Rajesh Kumar", flat_number="A-201"),
        make_profile("m2", name="Priya Sharma", flat_number="B-105"),
        make_profile("m3", name="Amit Singh", flat_number="C-303"),
    ]


@pytest.fixture
def sample_members() -> list[Member]:
    """Domain members: three active, one pending, one inactive"""
    return [
        Member(id="1", name="Rajesh Kumar", email="rajesh@email.com", flat_number="A-201", monthly_amount=Decimal("2500")),
        Member(id="2", name="Priya Sharma", email="priya@email.com", flat_number="B-105", monthly_amount=Decimal("2500")),
        Member(id="3", name="Amit Singh", email="amit@email.com", flat_number="C-303", monthly_amount=Decimal("3000")),
        Member(
            id="4",
            name="Sunita Devi",
            email="sunita@email.com",
            flat_number="A-102",
            monthly_amount=Decimal("2500"),
            status=MemberStatus.PENDING,
        ),
        Member(
            id="5",
            name="Rohit Gupta",
            email="rohit@email.com",
            flat_number="B-207",
            monthly_amount=Decimal("2500"),
            status=MemberStatus.INACTIVE,
        ),
    ]


@pytest.fixture
def sample_bills() -> list[Bill]:
    """March 2024: one paid, one pending, one overdue; plus a paid February bill"""
    return [
        Bill(
            id="1-2024-2",
            member_id="1",
            month=2,
            year=2024,
            amount=Decimal("2500"),
            due_date=date(2024, 2, 15),
            status=BillStatus.PAID,
            payment_date=date(2024, 2, 10),
            payment_method="Online",
            receipt_number="RC001",
        ),
        Bill(
            id="1-2024-3",
            member_id="1",
            month=3,
            year=2024,
            amount=Decimal("2500"),
            due_date=date(2024, 3, 15),
            status=BillStatus.PAID,
            payment_date=date(2024, 3, 5),
            payment_method="Cash",
            receipt_number="RC002",
        ),
        Bill(
            id="2-2024-3",
            member_id="2",
            month=3,
            year=2024,
            amount=Decimal("2500"),
            due_date=date(2024, 3, 15),
            status=BillStatus.PENDING,
        ),
        Bill(
            id="3-2024-3",
            member_id="3",
            month=3,
            year=2024,
            amount=Decimal("3000"),
            due_date=date(2024, 3, 15),
            status=BillStatus.OVERDUE,
        ),
    ]


@pytest.fixture
def sample_expenses() -> list[Expense]:
    return [
        Expense(
            category=ExpenseCategory.ELECTRICITY,
            description="Common area electricity",
            amount=Decimal("1500.50"),
            date=date(2024, 3, 10),
            vendor="State Electricity Board",
        ),
        Expense(
            category=ExpenseCategory.SECURITY,
            description="Guard salary",
            amount=Decimal("2000"),
            date=date(2024, 3, 8),
            vendor="Guardian Security Services",
        ),
        Expense(
            category=ExpenseCategory.ELECTRICITY,
            description="February electricity",
            amount=Decimal("1000"),
            date=date(2024, 2, 9),
            vendor="State Electricity Board",
        ),
    ]
