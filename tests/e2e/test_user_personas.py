"""
E2E tests for user personas against the seeded demo society.

The demo store is seeded as of 2024-03-20 (see DATA_MODE=demo):
six active residents at 2500 each, January and February settled except the
arrears below, March bills pending, five March expenses, three notices.

User personas:
- admin: month-end dashboard, billing run, collections
- resident_paid_up (1, Rajesh Kumar): no arrears, pays March online
- resident_arrears (5, Rohit Gupta): January and February overdue
- resident_late (6, Neha Jain): February overdue
- newcomer: signs up, waits for approval, gets billed next month
"""

import random
import pytest
from sqlalchemy import func
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient
from society_portal.infrastructure.database.models import BillRecord, Profile
from society_portal.infrastructure.database.seed import DEMO_ADMIN_ID, init_demo_store, seed_demo_data
from society_portal.infrastructure.database.session import build_engine

ADMIN = {"X-User-Id": DEMO_ADMIN_ID}


def as_user(member_id: str) -> dict:
    return {"X-User-Id": member_id}


@pytest.fixture
def demo_society(db: Session, fixed_today) -> int:
    return seed_demo_data(db, today=fixed_today, rng=random.Random(7))


@pytest.mark.integration
def test_demo_store_contents(demo_society: int):
    """6 residents x 3 months of bills"""
    assert demo_society == 18


@pytest.mark.integration
def test_demo_store_follows_service_clock(db: Session, fixed_today):
    """Seeding without an explicit date bills up to the service's current month"""
    assert seed_demo_data(db, rng=random.Random(7)) == 18
    assert db.query(func.max(BillRecord.month)).scalar() == 3


@pytest.mark.integration
def test_admin_dashboard(client: TestClient, demo_society):
    """
    admin: opens the dashboard mid-March
    Expected: nothing collected yet this month, two residents in arrears
    """
    stats = client.get("/v1/reports/stats", headers=ADMIN).json()

    assert stats["total_members"] == 6
    assert stats["active_members"] == 6
    assert stats["pending_members"] == 0
    assert stats["total_collection"] == 0.0
    assert stats["collection_rate"] == 0
    assert stats["total_expenses"] == 67000.0
    assert stats["net_balance"] == -67000.0
    assert stats["overdue_count"] == 2
    assert stats["monthly_target"] == 15000.0


@pytest.mark.integration
def test_admin_reports(client: TestClient, demo_society):
    breakdown = client.get("/v1/reports/payment-status", headers=ADMIN).json()
    assert breakdown == {"paid": 9, "pending": 6, "overdue": 3, "collection_efficiency": 50.0}

    report = client.get("/v1/reports/yearly", headers=ADMIN).json()
    assert report["year"] == 2024
    assert report["income"] == 22500.0
    assert report["expenses"] == 67000.0

    categories = client.get("/v1/reports/expense-categories", headers=ADMIN).json()
    assert categories[0] == {"category": "security", "amount": 25000.0}
    assert len(categories) == 5

    defaulters = client.get("/v1/reports/defaulters", headers=ADMIN).json()
    assert [(d["member_id"], d["overdue_amount"], d["overdue_bills"]) for d in defaulters] == [
        ("5", 5000.0, 2),
        ("6", 2500.0, 1),
    ]
    assert defaulters[0]["last_paid"] is None
    assert defaulters[1]["last_paid"] is not None


@pytest.mark.integration
def test_resident_paid_up_pays_march(client: TestClient, demo_society):
    """
    resident_paid_up: pays the March bill from the member dashboard
    Expected: nothing outstanding, collection rate moves to 17%
    """
    summary = client.get("/v1/reports/me", headers=as_user("1")).json()
    assert summary["pending_amount"] == 2500.0
    assert summary["next_due_date"] == "2024-03-15"
    assert len(summary["recent_payments"]) == 2
    assert len(summary["notices"]) == 3

    response = client.post("/v1/bills/1-2024-3/pay", headers=as_user("1"))
    assert response.status_code == 200
    assert response.json()["payment_method"] == "Online"

    summary = client.get("/v1/reports/me", headers=as_user("1")).json()
    assert summary["pending_amount"] == 0.0
    assert summary["next_due_date"] is None
    assert summary["recent_payments"][0]["id"] == "1-2024-3"

    stats = client.get("/v1/reports/stats", headers=ADMIN).json()
    assert stats["total_collection"] == 2500.0
    assert stats["collection_rate"] == 17


@pytest.mark.integration
def test_resident_arrears(client: TestClient, demo_society):
    """
    resident_arrears: two overdue months plus March
    Expected: 7500 outstanding, oldest due date first; cannot pay others' bills
    """
    summary = client.get("/v1/reports/me", headers=as_user("5")).json()

    assert summary["pending_amount"] == 7500.0
    assert summary["next_due_date"] == "2024-01-15"
    assert [b["status"] for b in summary["unpaid_bills"]] == ["overdue", "overdue", "pending"]
    assert summary["recent_payments"] == []

    assert client.post("/v1/bills/1-2024-3/pay", headers=as_user("5")).status_code == 404


@pytest.mark.integration
def test_admin_collects_arrears(client: TestClient, demo_society):
    """
    admin: records a cash payment for resident_late's overdue February bill
    Expected: resident_late drops off the defaulter list
    """
    response = client.post("/v1/bills/6-2024-2/pay", json={"payment_method": "Cash"}, headers=ADMIN)
    assert response.status_code == 200
    assert response.json()["payment_date"] == "2024-03-20"

    defaulters = client.get("/v1/reports/defaulters", headers=ADMIN).json()
    assert [d["member_id"] for d in defaulters] == ["5"]

    assert client.post("/v1/bills/6-2024-2/pay", headers=ADMIN).status_code == 409


@pytest.mark.integration
def test_past_due_view(client: TestClient, demo_society):
    """On the 20th every unpaid bill is past due; statuses are untouched"""
    past_due = client.get("/v1/bills/past-due", headers=ADMIN).json()

    assert len(past_due) == 9
    assert past_due[0]["id"] == "5-2024-1"
    assert sum(1 for b in past_due if b["status"] == "pending") == 6


@pytest.mark.integration
def test_newcomer_onboarding(client: TestClient, demo_society):
    """
    newcomer: registers in March, is approved, and is billed from April
    Expected: pending newcomer is not billed; April run covers all seven residents
    """
    response = client.post(
        "/v1/members/register",
        json={"user_id": "new-1", "name": "Kavita Rao", "email": "kavita.rao@email.com", "flat_number": "C-102"},
    )
    assert response.status_code == 201
    assert client.get("/v1/reports/me", headers=as_user("new-1")).status_code == 403

    stats = client.get("/v1/reports/stats", headers=ADMIN).json()
    assert stats["pending_members"] == 1

    response = client.post("/v1/members/new-1/approve", headers=ADMIN)
    assert response.json()["status"] == "active"

    response = client.post("/v1/bills/generate", json={"month": 4, "year": 2024}, headers=ADMIN)
    assert response.json()["created"] == 7

    response = client.post("/v1/bills/generate", json={"month": 4, "year": 2024}, headers=ADMIN)
    assert response.json()["created"] == 0

    summary = client.get("/v1/reports/me", headers=as_user("new-1")).json()
    assert summary["pending_amount"] == 2500.0
    assert summary["next_due_date"] == "2024-04-15"


@pytest.mark.integration
def test_init_demo_store_seeds_once():
    """Restarting in demo mode does not duplicate the society"""
    engine = build_engine("sqlite://")

    init_demo_store(engine)
    init_demo_store(engine)

    with Session(bind=engine) as db:
        assert db.query(func.count(Profile.id)).scalar() == 7
        bills = db.query(func.count(BillRecord.id)).scalar()
        months = db.query(func.count(func.distinct(BillRecord.month))).scalar()

    assert bills == 6 * months
