"""
Database initialization script
Run this to create tables and seed demo data
"""
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from app.core.database import engine, Base, SessionLocal
from app.models import Agent, Customer, Policy, Payment, PaymentMode


def init_db():
    """Initialize database with tables"""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Tables created successfully")


def seed_data(db) -> bool:
    """Seed a demo agent and a small customer book. Skips a non-empty database."""
    if db.query(Customer).first():
        print("✓ Customers already present, skipping seed")
        return False

    today = date.today()

    if not db.query(Agent).filter(Agent.id == "demo-agent").first():
        db.add(Agent(
            id="demo-agent",
            name="Demo Agent",
            email="agent@policydesk.local",
            phone="+91 98765 43210",
            agent_code="AG-0001",
            photo_url="",
        ))
        print("✓ Demo agent created (id: demo-agent)")

    customers = [
        {
            "name": "Asha Verma",
            "phone": "9810012345",
            "address": "12 MG Road, Pune",
            "policies": [
                {
                    "policy_number": "LIC-100234",
                    "plan_name": "Jeevan Anand",
                    "premium": Decimal("2500"),
                    "mode": PaymentMode.MONTHLY,
                    "due_date": today + timedelta(days=3),
                    "sum_assured": Decimal("500000"),
                    "payments": [Decimal("1000"), Decimal("500")],
                },
                {
                    "policy_number": "LIC-100871",
                    "plan_name": "Tech Term",
                    "premium": Decimal("12000"),
                    "mode": PaymentMode.YEARLY,
                    "due_date": today + timedelta(days=90),
                    "sum_assured": Decimal("10000000"),
                    "payments": [Decimal("12000")],
                },
            ],
        },
        {
            "name": "Rohit Nair",
            "phone": "9822098765",
            "address": "4 Marine Drive, Kochi",
            "policies": [
                {
                    "policy_number": "LIC-200455",
                    "plan_name": "New Endowment",
                    "premium": Decimal("6000"),
                    "mode": PaymentMode.QUARTERLY,
                    "due_date": today - timedelta(days=10),
                    "sum_assured": Decimal("300000"),
                    "payments": [],
                },
            ],
        },
    ]

    for data in customers:
        customer = Customer(name=data["name"], phone=data["phone"], address=data["address"])
        for pol in data["policies"]:
            payments = [
                Payment(amount=amount, paid_on=today - timedelta(days=i), note="Demo payment")
                for i, amount in enumerate(pol["payments"])
            ]
            customer.policies.append(Policy(
                policy_number=pol["policy_number"],
                plan_name=pol["plan_name"],
                premium=pol["premium"],
                mode=pol["mode"].value,
                due_date=pol["due_date"],
                sum_assured=pol["sum_assured"],
                status="Active",
                payments=payments,
            ))
        db.add(customer)
        print(f"✓ Created customer {data['name']} with {len(data['policies'])} policies")

    db.commit()
    print("\n✓ Database seeded successfully!")
    return True


if __name__ == "__main__":
    print("=" * 60)
    print("Policy Desk - Database Initialization")
    print("=" * 60)

    init_db()

    session = SessionLocal()
    try:
        seed_data(session)
    except Exception as e:
        print(f"\n✗ Error seeding data: {e}")
        session.rollback()
        raise
    finally:
        session.close()

    print("\n" + "=" * 60)
    print("Initialization complete!")
    print("=" * 60)
    print("\nYou can now access:")
    print("  - API: http://localhost:8000")
    print("  - API Docs: http://localhost:8000/docs")
    print("=" * 60)
