# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Collection ORM models and their two link tables."""

from sqlalchemy import Column, String, ForeignKey

from database import Base


class Collection(Base):
    __tablename__ = "collections"

    uuid = Column(String(36), primary_key=True)
    org_uuid = Column(String(36), ForeignKey("organizations.uuid"), nullable=False, index=True)
    name = Column(String(255), nullable=False)


class CollectionAssignment(Base):
    """Explicit grant: *user_uuid* may see what is inside *collection_uuid*."""

    __tablename__ = "users_collections"

    user_uuid = Column(String(36), ForeignKey("users.uuid"), primary_key=True)
    collection_uuid = Column(String(36), ForeignKey("collections.uuid"), primary_key=True)


class CollectionCipher(Base):
    __tablename__ = "ciphers_collections"

    cipher_uuid = Column(String(36), ForeignKey("ciphers.uuid"), primary_key=True)
    collection_uuid = Column(String(36), ForeignKey("collections.uuid"), primary_key=True)
