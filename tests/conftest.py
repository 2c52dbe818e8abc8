"""
Shared fixtures

The environment is configured before bidwell is imported so the engine,
the rate limiter and the cached settings all see the test values.
"""
import os
import tempfile
from datetime import timedelta

_TEST_DIR = tempfile.mkdtemp(prefix="bidwell-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BID_INCREMENT_CENTS"] = "1"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bidwell.core.database import SessionLocal, drop_db, init_db  # noqa: E402
from bidwell.core.security import PasswordHasher  # noqa: E402
from bidwell.core.timeutils import utcnow  # noqa: E402
from bidwell.main import app  # noqa: E402
from bidwell.models import (  # noqa: E402
    Auction,
    AuctionItem,
    AuctionStatus,
    Bid,
    Organization,
    User,
    UserRole,
)

PASSWORD = "password123"
VALID_DEPOSIT = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "cardNumber": "4242 4242 4242 4242",
    "expiry": "12/30",
    "cvc": "123",
    "agreed": True,
}


class Factory:
    """
    Creates rows in short-lived sessions

    Each helper commits and closes its own session, so no write lock is held
    while a test talks to the app.
    """

    def __init__(self):
        self.hasher = PasswordHasher(rounds=4)
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def _save(self, obj):
        with SessionLocal() as db:
            db.add(obj)
            db.commit()
        return obj

    def organization(self, name="Riverdale Community Foundation", **kwargs):
        return self._save(Organization(name=name, **kwargs))

    def user(self, email=None, password=PASSWORD, first_name="Jane", last_name="Doe",
             role=UserRole.BIDDER, org_id=None):
        email = email or f"user{self._next()}@example.com"
        return self._save(
            User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                password_hash=self.hasher.hash(password),
                role=role,
                org_id=org_id,
            )
        )

    def admin(self, org_id, email=None, **kwargs):
        return self.user(email=email or f"admin{self._next()}@example.org", role=UserRole.ADMIN,
                         org_id=org_id, **kwargs)

    def auction(self, org_id, name="Spring Gala", status=AuctionStatus.ACTIVE, ends_in=timedelta(hours=48)):
        now = utcnow()
        return self._save(
            Auction(
                org_id=org_id,
                name=name,
                description="Annual fundraiser",
                ends_at=now + ends_in,
                status=status,
                created_at=now,
                updated_at=now,
            )
        )

    def item(self, auction_id, title="Weekend Cabin Getaway", starting_bid=5000):
        return self._save(AuctionItem(auction_id=auction_id, title=title, starting_bid=starting_bid))

    def bid(self, item_id, user_id, amount, created_at=None):
        return self._save(Bid(item_id=item_id, user_id=user_id, amount=amount, created_at=created_at or utcnow()))


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test"""
    drop_db()
    init_db()
    yield


@pytest.fixture
def factory():
    return Factory()


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def live_auction(factory):
    """Organization, active auction and one item with a $50.00 starting bid"""
    org = factory.organization()
    auction = factory.auction(org.id)
    item = factory.item(auction.id, starting_bid=5000)
    return {"org": org, "auction": auction, "item": item}


def login(client, email, password=PASSWORD):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response


def verify(client, auction_id):
    response = client.post(f"/api/auctions/{auction_id}/verify", json=VALID_DEPOSIT)
    assert response.status_code == 200, response.text
    return response
