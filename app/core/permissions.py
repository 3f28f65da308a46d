"""
Role-based permission helpers.

Roles form a lattice: member < owner. Endpoint gates check the caller's
role against an explicit allowed set with role_satisfies(); rank
comparisons go through can_act_as().
"""

from typing import Iterable, Optional

from app.models.enums import MembershipRole, MembershipStatus


# Rank of each role in the lattice
ROLE_RANK = {
    MembershipRole.MEMBER: 1,
    MembershipRole.OWNER: 2,
}


def role_at_least(role: MembershipRole, required: MembershipRole) -> bool:
    """True if `role` is the same as or above `required`."""
    return ROLE_RANK[MembershipRole(role)] >= ROLE_RANK[MembershipRole(required)]


def role_satisfies(role: Optional[MembershipRole], allowed_roles: Iterable[MembershipRole]) -> bool:
    """
    Check a role against a set of allowed roles.

    Membership in the set is all that counts; an owner only passes a gate
    that lists the owner role.

    Args:
        role: The principal's role in the active organization
        allowed_roles: Roles permitted by the endpoint

    Returns:
        True if permitted, False otherwise
    """
    if role is None:
        return False
    return MembershipRole(role) in {MembershipRole(r) for r in allowed_roles}


def can_act_as(membership, required_role: MembershipRole) -> bool:
    """
    The canonical predicate: may the holder of `membership` act as `required_role`?

    True iff the membership exists, is active, and its role reaches the
    required role.
    """
    if membership is None or membership.status != MembershipStatus.ACTIVE:
        return False
    return role_at_least(membership.role, required_role)
