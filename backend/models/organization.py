# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Organization and Membership ORM models."""

import enum

from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from database import Base


class MembershipRole(enum.IntEnum):
    """Lower value = fewer restrictions.  ``role <= ADMIN`` means Owner or Admin."""

    OWNER = 0
    ADMIN = 1
    MANAGER = 2
    MEMBER = 3


class Organization(Base):
    __tablename__ = "organizations"

    uuid = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Membership(Base):
    __tablename__ = "users_organizations"
    __table_args__ = (UniqueConstraint("user_uuid", "org_uuid", name="uq_users_organizations_user_org"),)

    uuid = Column(String(36), primary_key=True)
    user_uuid = Column(String(36), ForeignKey("users.uuid"), nullable=False, index=True)
    org_uuid = Column(String(36), ForeignKey("organizations.uuid"), nullable=False, index=True)
    # Blanket access: every cipher of the organization, regardless of collections
    access_all = Column(Boolean, nullable=False, default=False)
    atype = Column(Integer, nullable=False, default=int(MembershipRole.MEMBER))

    @property
    def role(self) -> MembershipRole:
        return MembershipRole(self.atype)
