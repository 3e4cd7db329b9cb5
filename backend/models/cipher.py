# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Cipher ORM model – one encrypted vault item."""

import enum

from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey, CheckConstraint

from database import Base


class CipherType(enum.IntEnum):
    LOGIN = 1
    SECURE_NOTE = 2
    CARD = 3
    IDENTITY = 4


class Cipher(Base):
    __tablename__ = "ciphers"
    __table_args__ = (
        CheckConstraint(
            "(user_uuid IS NULL) <> (organization_uuid IS NULL)",
            name="ck_ciphers_single_owner",
        ),
    )

    uuid = Column(String(36), primary_key=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    # Exactly one of these is set, at creation, and never changes afterwards.
    user_uuid = Column(String(36), ForeignKey("users.uuid"), nullable=True, index=True)
    organization_uuid = Column(String(36), ForeignKey("organizations.uuid"), nullable=True, index=True)

    atype = Column(Integer, nullable=False)
    # name / notes / fields / data hold client-side ciphertext; never decrypted here
    name = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    fields = Column(Text, nullable=True)   # JSON array
    data = Column(Text, nullable=False)    # JSON object, shape depends on atype
    favorite = Column(Boolean, nullable=False, default=False)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if (self.user_uuid is None) == (self.organization_uuid is None):
            raise ValueError("A cipher must be owned by exactly one of a user or an organization")

    @property
    def cipher_type(self) -> CipherType:
        return CipherType(self.atype)

    @property
    def is_personal(self) -> bool:
        return self.user_uuid is not None
