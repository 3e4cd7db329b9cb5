# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Folder ORM models."""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func

from database import Base


class Folder(Base):
    __tablename__ = "folders"

    uuid = Column(String(36), primary_key=True)
    # Folders are personal – never shared through an organization
    user_uuid = Column(String(36), ForeignKey("users.uuid"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class FolderCipher(Base):
    # No unique key can express "one folder per (user, cipher)" because the
    # user lives on the folder row; vault.folders.move_to_folder keeps it.
    __tablename__ = "folders_ciphers"

    cipher_uuid = Column(String(36), ForeignKey("ciphers.uuid"), primary_key=True)
    folder_uuid = Column(String(36), ForeignKey("folders.uuid"), primary_key=True)
