# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Membership lookups – what a user is inside one organization.

All functions are pure reads.  A missing membership row is a normal answer
("no access through this path"), never an error.
"""

from typing import Optional

from sqlalchemy.orm import Session

from models.organization import Membership, MembershipRole


def get_membership(db: Session, user_uuid: str, org_uuid: str) -> Optional[Membership]:
    return (
        db.query(Membership)
        .filter(Membership.user_uuid == user_uuid, Membership.org_uuid == org_uuid)
        .first()
    )


def has_blanket_access(db: Session, user_uuid: str, org_uuid: str) -> bool:
    """True if the user's membership in *org_uuid* has ``access_all`` set."""
    membership = get_membership(db, user_uuid, org_uuid)
    return bool(membership and membership.access_all)


def role_of(db: Session, user_uuid: str, org_uuid: str) -> Optional[MembershipRole]:
    membership = get_membership(db, user_uuid, org_uuid)
    return membership.role if membership else None


def is_admin_or_owner(db: Session, user_uuid: str, org_uuid: str) -> bool:
    role = role_of(db, user_uuid, org_uuid)
    return role is not None and role <= MembershipRole.ADMIN
