"""Shared test fixtures for all test modules."""

import contextlib
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core import database as db_module
from app.core.auth import create_access_token
from app.core.database import Base, enable_sqlite_foreign_keys
from app.core.rate_limiter import api_rate_limiter
from app.models.city import City
from app.models.coupon import Coupon, CouponStatus
from app.models.customer_membership import CustomerMembership, CustomerMembershipStatus
from app.models.salon import Salon
from app.models.salon_membership_plan import MembershipPlanStatus, SalonMembershipPlan
from app.models.user import User, UserRole

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(_test_engine)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.commit()
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    api_rate_limiter.reset()
    yield
    api_rate_limiter.reset()


# ---------------------------------------------------------------------------
# Factories shared by service and API tests
# ---------------------------------------------------------------------------


def make_user(db: Session, role: UserRole = UserRole.CUSTOMER, name: str = "Test User") -> User:
    user = User(name=name, role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_salon(db: Session, name: str = "Glow Studio", city_name: str = "Pune") -> Salon:
    city = db.query(City).filter(City.name == city_name).first()
    if city is None:
        city = City(name=city_name, is_active=True)
        db.add(city)
        db.flush()
    salon = Salon(
        city_id=city.id,
        name=name,
        phone="9999999999",
        address="1 Main Road",
        services=["haircut"],
        rating=Decimal("0"),
        total_reviews=0,
        is_active=True,
    )
    db.add(salon)
    db.commit()
    db.refresh(salon)
    return salon


def make_plan(
    db: Session,
    salon: Salon,
    duration_days: int = 30,
    status: MembershipPlanStatus = MembershipPlanStatus.ACTIVE,
) -> SalonMembershipPlan:
    plan = SalonMembershipPlan(
        salon_id=salon.id,
        name="Gold",
        price=Decimal("999.00"),
        duration_days=duration_days,
        status=status.value,
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


def make_membership(
    db: Session,
    customer: User,
    salon: Salon,
    plan: SalonMembershipPlan | None = None,
    start: datetime | None = None,
    days: int = 30,
    status: CustomerMembershipStatus = CustomerMembershipStatus.ACTIVE,
) -> CustomerMembership:
    plan = plan or make_plan(db, salon, duration_days=days)
    start = start or datetime.now(UTC) - timedelta(days=1)
    membership = CustomerMembership(
        customer_id=customer.id,
        salon_id=salon.id,
        plan_id=plan.id,
        start_date=start,
        end_date=start + timedelta(days=days),
        status=status.value,
    )
    db.add(membership)
    db.commit()
    db.refresh(membership)
    return membership


def make_coupon(
    db: Session,
    salon: Salon,
    code: str = "WELCOME10",
    max_usage: int = 100,
    valid_from: datetime | None = None,
    valid_to: datetime | None = None,
    status: CouponStatus = CouponStatus.ACTIVE,
) -> Coupon:
    now = datetime.now(UTC)
    coupon = Coupon(
        salon_id=salon.id,
        code=code,
        discount=Decimal("10"),
        price=Decimal("0"),
        max_usage=max_usage,
        valid_from=valid_from or now - timedelta(days=1),
        valid_to=valid_to or now + timedelta(days=30),
        status=status.value,
    )
    db.add(coupon)
    db.commit()
    db.refresh(coupon)
    return coupon


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(int(user.id), str(user.role))  # type: ignore[arg-type]
    return {"Authorization": f"Bearer {token}"}
