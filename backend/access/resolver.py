# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Cipher access resolution.

A user reaches a cipher either by owning it personally or through a
membership in the organization that owns it.  Inside an organization the
membership qualifies when any of these holds:

* ``access_all`` is set (blanket access),
* the role is Owner or Admin,
* the user is assigned to a collection the cipher is linked to.

Known limitations, kept on purpose until the permission model is extended
-------------------------------------------------------------------------
* Write access never comes from a collection assignment; only blanket
  access or an Owner/Admin role lets a member edit an organization cipher.
* Read access is the same check as write access.  Read-only collection
  grants and group permissions are not modelled.

Nothing here raises for "no access": the answer is ``False`` or an empty
set, and callers treat it as final.
"""

from sqlalchemy import and_, exists, or_
from sqlalchemy.orm import Session

from access.membership import has_blanket_access, is_admin_or_owner
from models.cipher import Cipher
from models.collection import Collection, CollectionAssignment, CollectionCipher
from models.organization import Membership, MembershipRole


# ---------------------------------------------------------------------------
# Single cipher
# ---------------------------------------------------------------------------


def can_write(db: Session, user_uuid: str, cipher: Cipher) -> bool:
    if cipher.is_personal:
        return cipher.user_uuid == user_uuid

    # TODO: honour per-collection write permission once collection grants carry a read-only flag
    return has_blanket_access(db, user_uuid, cipher.organization_uuid) or is_admin_or_owner(
        db, user_uuid, cipher.organization_uuid
    )


def can_read(db: Session, user_uuid: str, cipher: Cipher) -> bool:
    """Same as :func:`can_write` – there is no read-only access path yet."""
    return can_write(db, user_uuid, cipher)


# ---------------------------------------------------------------------------
# Bulk listing
# ---------------------------------------------------------------------------


def _qualifying_membership(user_uuid: str):
    """
    Membership of *user_uuid* in the cipher's organization that grants
    visibility: blanket access, Owner/Admin, or an assigned collection that
    holds the cipher.
    """
    assigned_collection = (
        exists()
        .where(CollectionCipher.cipher_uuid == Cipher.uuid)
        .where(CollectionAssignment.collection_uuid == CollectionCipher.collection_uuid)
        .where(CollectionAssignment.user_uuid == user_uuid)
    )
    return (
        exists()
        .where(Membership.org_uuid == Cipher.organization_uuid)
        .where(Membership.user_uuid == user_uuid)
        .where(
            or_(
                Membership.access_all.is_(True),
                Membership.atype <= int(MembershipRole.ADMIN),
                assigned_collection,
            )
        )
    )


def find_visible(db: Session, user_uuid: str) -> list[Cipher]:
    """
    Every cipher the user may list: personally owned ones plus qualifying
    organization ciphers.  Each cipher appears once, however many
    collections lead to it.  Order follows the underlying scan.
    """
    return (
        db.query(Cipher)
        .filter(
            or_(
                Cipher.user_uuid == user_uuid,
                and_(Cipher.organization_uuid.isnot(None), _qualifying_membership(user_uuid)),
            )
        )
        .all()
    )


# ---------------------------------------------------------------------------
# Collections of one cipher, as seen by one user
# ---------------------------------------------------------------------------


def collections_for(db: Session, user_uuid: str, cipher: Cipher) -> set[str]:
    """
    Collection ids of the cipher's own organization that contain the cipher
    and that the user qualifies for.  Personal ciphers, and organization
    ciphers whose organization the user is not a member of, give ``set()``.
    """
    if cipher.is_personal:
        return set()

    rows = (
        db.query(CollectionCipher.collection_uuid)
        .join(Collection, Collection.uuid == CollectionCipher.collection_uuid)
        .join(
            Membership,
            and_(
                Membership.org_uuid == Collection.org_uuid,
                Membership.user_uuid == user_uuid,
            ),
        )
        .outerjoin(
            CollectionAssignment,
            and_(
                CollectionAssignment.collection_uuid == CollectionCipher.collection_uuid,
                CollectionAssignment.user_uuid == user_uuid,
            ),
        )
        .filter(CollectionCipher.cipher_uuid == cipher.uuid)
        .filter(Collection.org_uuid == cipher.organization_uuid)
        .filter(
            or_(
                CollectionAssignment.user_uuid.isnot(None),
                Membership.access_all.is_(True),
                Membership.atype <= int(MembershipRole.ADMIN),
            )
        )
        .all()
    )
    return {collection_uuid for (collection_uuid,) in rows}
