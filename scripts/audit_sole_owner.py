"""
Report organizations that have members but no active owner.

Every organization with memberships must keep at least one active owner.
Mutations enforce this; the audit catches rows changed outside the API.
Exits with status 1 when violations are found.

Usage:
    python scripts/audit_sole_owner.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.logging import configure_logging
from app.db.session import AsyncSessionLocal
from app.services.membership_service import MembershipService


async def audit_sole_owner() -> int:
    async with AsyncSessionLocal() as db:
        ownerless = await MembershipService(db).find_ownerless_organizations()

    if not ownerless:
        print("✓ Every organization with members has an active owner.")
        return 0

    print(f"❌ {len(ownerless)} organization(s) without an active owner:")
    for organization in ownerless:
        print(f"  - {organization.name} (ID: {organization.id})")
    return 1


if __name__ == "__main__":
    configure_logging("WARNING")
    sys.exit(asyncio.run(audit_sole_owner()))
