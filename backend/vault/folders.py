# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Cipher ↔ personal folder mapping.

For one (user, cipher) pair there is either no folder or exactly one.
:func:`move_to_folder` is the only way to change it; callers run it inside
``database.transaction`` so a move never leaves the cipher in neither
folder.

    current   target    action                      result
    -------   -------   -------------------------   ----------------
    none      none      nothing                     UNCHANGED
    none      F         add link F                  ASSIGNED
    F         F         nothing                     UNCHANGED
    F         G         drop link F, add link G     MOVED (or MOVED_WITH_DRIFT)
    F         none      drop link F                 REMOVED
"""

import enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import InconsistentStateError, StoreFailureError
from models.cipher import Cipher
from models.folder import Folder, FolderCipher


class FolderMove(enum.Enum):
    UNCHANGED = "unchanged"
    ASSIGNED = "assigned"
    MOVED = "moved"
    # The old link had already vanished; the new one was created anyway.
    MOVED_WITH_DRIFT = "moved_with_drift"
    REMOVED = "removed"


def get_folder_uuid(db: Session, cipher_uuid: str, user_uuid: str) -> Optional[str]:
    """Id of *user_uuid*'s folder holding the cipher, or None."""
    row = (
        db.query(FolderCipher.folder_uuid)
        .join(Folder, Folder.uuid == FolderCipher.folder_uuid)
        .filter(Folder.user_uuid == user_uuid)
        .filter(FolderCipher.cipher_uuid == cipher_uuid)
        .first()
    )
    return row[0] if row else None


def _find_link(db: Session, folder_uuid: str, cipher_uuid: str) -> Optional[FolderCipher]:
    return (
        db.query(FolderCipher)
        .filter(FolderCipher.folder_uuid == folder_uuid, FolderCipher.cipher_uuid == cipher_uuid)
        .first()
    )


def _add_link(db: Session, folder_uuid: str, cipher_uuid: str) -> None:
    try:
        db.add(FolderCipher(folder_uuid=folder_uuid, cipher_uuid=cipher_uuid))
        db.flush()
    except SQLAlchemyError as exc:
        raise StoreFailureError("Couldn't save folder setting") from exc


def _drop_link(db: Session, link: FolderCipher) -> None:
    try:
        db.delete(link)
        db.flush()
    except SQLAlchemyError as exc:
        raise StoreFailureError("Failed removing old folder mapping") from exc


def move_to_folder(
    db: Session,
    cipher: Cipher,
    user_uuid: str,
    folder_uuid: Optional[str],
) -> FolderMove:
    """
    Put *cipher* in *folder_uuid* for *user_uuid* (None = no folder).

    Raises InconsistentStateError when the cipher must leave a folder whose
    link row is gone, and StoreFailureError when the database fails.
    """
    current = get_folder_uuid(db, cipher.uuid, user_uuid)

    if current is None:
        if folder_uuid is None:
            return FolderMove.UNCHANGED
        _add_link(db, folder_uuid, cipher.uuid)
        return FolderMove.ASSIGNED

    if folder_uuid == current:
        return FolderMove.UNCHANGED

    # Re-read the row: a concurrent request may have dropped it since get_folder_uuid
    link = _find_link(db, current, cipher.uuid)

    if folder_uuid is None:
        if link is None:
            raise InconsistentStateError("Cannot remove a mapping that does not exist")
        _drop_link(db, link)
        return FolderMove.REMOVED

    if link is None:
        _add_link(db, folder_uuid, cipher.uuid)
        return FolderMove.MOVED_WITH_DRIFT

    _drop_link(db, link)
    _add_link(db, folder_uuid, cipher.uuid)
    return FolderMove.MOVED
