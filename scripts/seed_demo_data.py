"""
Seed a demo owner, organization and one provisioned member.

Run after migrations. Safe to re-run: an existing demo owner is reported
and left untouched.

Usage:
    python scripts/seed_demo_data.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.logging import configure_logging
from app.db.session import AsyncSessionLocal
from app.models.enums import MembershipRole
from app.repositories.principal_repository import PrincipalRepository
from app.services.auth_service import AuthService

OWNER_EMAIL = "alice@acme-demo.com"
OWNER_PASSWORD = "correct-horse-9"
MEMBER_EMAIL = "ben@acme-demo.com"


async def seed_demo_data():
    """Register the demo owner with an organization and provision a member."""

    async with AsyncSessionLocal() as db:
        existing = await PrincipalRepository(db).get_by_email(OWNER_EMAIL)
        if existing:
            print(f"✓ Demo owner already exists: {existing.email} (ID: {existing.id})")
            return

        service = AuthService(db)
        owner = await service.register_owner(
            name="Alice Owner",
            email=OWNER_EMAIL,
            password=OWNER_PASSWORD,
            organization_name="Acme Demo",
            industry="SaaS",
        )
        outcome = await service.provision_member(
            actor_id=owner.principal.id,
            organization_id=owner.organization.id,
            email=MEMBER_EMAIL,
            name="Ben Member",
            role=MembershipRole.MEMBER,
        )
        await db.commit()

        print("✓ Created organization:")
        print(f"  Name: {owner.organization.name}")
        print(f"  Organization ID: {owner.organization.id}")
        print("\n✓ Owner login:")
        print(f"  Email: {OWNER_EMAIL}")
        print(f"  Password: {OWNER_PASSWORD}")
        print("\n✓ Provisioned member (pending setup):")
        print(f"  Email: {MEMBER_EMAIL}")
        print(f"  Setup link: {outcome.setup_link}")


if __name__ == "__main__":
    configure_logging("WARNING")
    print("Seeding demo data...\n")
    asyncio.run(seed_demo_data())
    print("\n✓ Done!")
