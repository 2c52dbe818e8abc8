"""
Seed script to populate the database with sample organizations, auctions,
items and admin accounts

Usage:
    python -m bidwell.scripts.seed_data
"""
from datetime import timedelta

from sqlalchemy import select

from bidwell.core.config import get_settings
from bidwell.core.database import SessionLocal, init_db
from bidwell.core.security import PasswordHasher
from bidwell.core.timeutils import utcnow
from bidwell.models import Auction, AuctionItem, AuctionStatus, Organization, User
from bidwell.services import AuthService

ORGANIZATIONS = [
    {"id": "org_1", "name": "Riverdale Community Foundation"},
    {"id": "org_2", "name": "Westside Elementary PTA"},
]

AUCTIONS = [
    {
        "id": "auction_1",
        "org_id": "org_1",
        "name": "Spring Gala 2026",
        "description": "Annual fundraising gala for the Riverdale Community Foundation.",
        "hours": 48,
    },
    {
        "id": "auction_2",
        "org_id": "org_2",
        "name": "Spring Carnival Fundraiser",
        "description": "Westside Elementary PTA spring carnival silent auction.",
        "hours": 36,
    },
]

ITEMS = {
    "auction_1": [
        ("Weekend Cabin Getaway", "Two nights at a lakeside cabin, sleeps six.", 40000),
        ("Chef's Table Dinner", "Private tasting menu for four at Ember & Oak.", 25000),
        ("Signed Riverdale Hawks Jersey", "Home jersey signed by the 2025 roster.", 7500),
    ],
    "auction_2": [
        ("Principal for a Day", "Your student runs morning announcements and lunch duty.", 5000),
        ("Handmade Class Quilt", "Quilt made from squares designed by Mrs. Lee's class.", 12000),
    ],
}

ADMINS = [
    {"email": "admin@riverdale.org", "first_name": "Rita", "last_name": "Alvarez", "org_id": "org_1"},
    {"email": "admin@westside-pta.org", "first_name": "Sam", "last_name": "Okafor", "org_id": "org_2"},
]
ADMIN_PASSWORD = "password123"


def create_organizations(db):
    """Create sample organizations"""
    for data in ORGANIZATIONS:
        if db.get(Organization, data["id"]):
            print(f"Organization {data['id']} already exists, skipping...")
            continue
        db.add(Organization(**data))
        print(f"Created organization: {data['name']}")
    db.commit()


def create_auctions(db):
    """Create sample auctions with their items"""
    now = utcnow()
    for data in AUCTIONS:
        if db.get(Auction, data["id"]):
            print(f"Auction {data['id']} already exists, skipping...")
            continue

        auction = Auction(
            id=data["id"],
            org_id=data["org_id"],
            name=data["name"],
            description=data["description"],
            ends_at=now + timedelta(hours=data["hours"]),
            status=AuctionStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        db.add(auction)
        for title, description, starting_bid in ITEMS.get(data["id"], []):
            db.add(
                AuctionItem(
                    auction_id=data["id"],
                    title=title,
                    description=description,
                    starting_bid=starting_bid,
                )
            )
        print(f"Created auction: {auction.name}")
    db.commit()


def create_admins(db, hasher: PasswordHasher):
    """Create one admin per organization"""
    for data in ADMINS:
        existing = db.execute(select(User).where(User.email == data["email"])).scalar_one_or_none()
        if existing:
            print(f"User {data['email']} already exists, skipping...")
            continue
        AuthService.create_admin(db, hasher, password=ADMIN_PASSWORD, **data)
        print(f"Created admin: {data['email']}")


def main():
    """Main seed function"""
    print("Initializing database...")
    init_db()

    settings = get_settings()
    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    db = SessionLocal()
    try:
        create_organizations(db)
        create_auctions(db)
        create_admins(db, hasher)
        print("\nSeed complete.")
        print(f"Admin login: {ADMINS[0]['email']} / {ADMIN_PASSWORD}")
    except Exception as e:
        db.rollback()
        print(f"Error seeding data: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
