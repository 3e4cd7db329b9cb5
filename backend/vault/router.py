# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Cipher endpoints – listing, CRUD, and the partial (folder / favorite)
update.

Access invariants enforced by every handler
-------------------------------------------
* A bearer token is required on every endpoint (via ``get_current_caller``).
* Every single-cipher operation goes through ``_load_cipher``, which
  answers 404 for an unknown id and 403 when the access resolver refuses.
* Mutations run inside ``transaction(db)`` together with their audit event:
  either both are committed or neither is.
* Cipher contents are ciphertext produced by the client and are stored and
  returned verbatim.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from access.membership import has_blanket_access, is_admin_or_owner
from access.resolver import can_read, can_write, find_visible
from core.config import settings
from core.errors import NotFoundError, PermissionDeniedError
from core.logger import logger
from core.schemas import ListResponse
from core.security import Caller, get_current_caller
from database import get_db, transaction
from events.recorder import record_event
from models.cipher import Cipher
from models.collection import Collection, CollectionCipher
from models.event import EventType
from models.folder import Folder
from vault.ciphers import apply_cipher_data, delete_cipher, new_cipher, save_cipher, serialize_cipher
from vault.folders import FolderMove, move_to_folder
from vault.schemas import CipherRequest, PartialCipherRequest

router = APIRouter(prefix="/api", tags=["vault"])

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cipher(db: Session, cipher_id: str, caller: Caller, write: bool = False) -> Cipher:
    """
    Load a cipher and check that the caller may read it (or write it when
    *write* is set).  NotFoundError / PermissionDeniedError otherwise.
    """
    cipher = db.query(Cipher).filter(Cipher.uuid == cipher_id).first()
    if cipher is None:
        raise NotFoundError("Cipher doesn't exist")
    allowed = can_write if write else can_read
    if not allowed(db, caller.user_uuid, cipher):
        raise PermissionDeniedError("Cipher is not write accessible" if write else "Cipher is not accessible")
    return cipher


def _check_folder(db: Session, folder_id: str | None, caller: Caller) -> None:
    """A target folder must exist and belong to the caller."""
    if folder_id is None:
        return
    folder = db.query(Folder).filter(Folder.uuid == folder_id).first()
    if folder is None or folder.user_uuid != caller.user_uuid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid folder")


def _move(db: Session, cipher: Cipher, caller: Caller, folder_id: str | None) -> None:
    outcome = move_to_folder(db, cipher, caller.user_uuid, folder_id)
    if outcome is FolderMove.MOVED_WITH_DRIFT:
        logger.warning(
            "Folder mapping drift: cipher %s had no link row for user %s's previous folder",
            cipher.uuid,
            caller.user_uuid,
        )


def _serialize(db: Session, cipher: Cipher, caller: Caller) -> dict:
    return serialize_cipher(db, cipher, caller.user_uuid, settings.domain)


# ---------------------------------------------------------------------------
# GET /api/ciphers  – every cipher visible to the caller
# ---------------------------------------------------------------------------


@router.get("/ciphers", response_model=ListResponse)
def list_ciphers(
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Personal ciphers plus the organization ciphers the caller can see."""
    ciphers = find_visible(db, caller.user_uuid)
    return ListResponse(Data=[_serialize(db, c, caller) for c in ciphers])


# ---------------------------------------------------------------------------
# GET /api/ciphers/{id}
# ---------------------------------------------------------------------------


@router.get("/ciphers/{cipher_id}")
def get_cipher(
    cipher_id: str,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    cipher = _load_cipher(db, cipher_id, caller)
    return _serialize(db, cipher, caller)


# ---------------------------------------------------------------------------
# POST /api/ciphers  – create
# ---------------------------------------------------------------------------


@router.post("/ciphers", status_code=status.HTTP_200_OK)
def create_cipher(
    body: CipherRequest,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """
    Create a personal cipher, or an organization cipher when
    ``OrganizationId`` is given.  Organization ciphers need blanket access or
    an Owner/Admin role, and their ``CollectionIds`` must belong to that
    organization.
    """
    org_id = body.organization_id
    if org_id is not None:
        if not (has_blanket_access(db, caller.user_uuid, org_id) or is_admin_or_owner(db, caller.user_uuid, org_id)):
            raise PermissionDeniedError("Not allowed to create ciphers in this organization")
        collections = (
            db.query(Collection)
            .filter(Collection.uuid.in_(body.collection_ids), Collection.org_uuid == org_id)
            .all()
        ) if body.collection_ids else []
        if len(collections) != len(set(body.collection_ids)):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid collection")
    elif body.collection_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Personal ciphers cannot be placed in collections",
        )
    _check_folder(db, body.folder_id, caller)

    with transaction(db):
        cipher = new_cipher(
            body.type,
            body.name,
            user_uuid=None if org_id else caller.user_uuid,
            organization_uuid=org_id,
        )
        apply_cipher_data(cipher, body)
        save_cipher(db, cipher)
        for collection_id in set(body.collection_ids):
            db.add(CollectionCipher(cipher_uuid=cipher.uuid, collection_uuid=collection_id))
        db.flush()
        _move(db, cipher, caller, body.folder_id)
        record_event(db, EventType.CIPHER_CREATED, caller, cipher_uuid=cipher.uuid)

    logger.info("Cipher %s created by %s (org=%s)", cipher.uuid, caller.user_uuid, org_id)
    return _serialize(db, cipher, caller)


# ---------------------------------------------------------------------------
# PUT /api/ciphers/{id}  – full update
# ---------------------------------------------------------------------------


@router.put("/ciphers/{cipher_id}")
def update_cipher(
    cipher_id: str,
    body: CipherRequest,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """
    Replace the cipher's encrypted contents and move it to ``FolderId``.
    Ownership is fixed at creation: ``Type`` must not change and
    ``OrganizationId`` must match the current owner.
    """
    cipher = _load_cipher(db, cipher_id, caller, write=True)
    if int(body.type) != cipher.atype:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cipher type cannot be changed")
    if body.organization_id != cipher.organization_uuid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cipher owner cannot be changed")
    _check_folder(db, body.folder_id, caller)

    with transaction(db):
        apply_cipher_data(cipher, body)
        save_cipher(db, cipher)
        _move(db, cipher, caller, body.folder_id)
        record_event(db, EventType.CIPHER_UPDATED, caller, cipher_uuid=cipher.uuid)

    logger.info("Cipher %s updated by %s", cipher.uuid, caller.user_uuid)
    return _serialize(db, cipher, caller)


# ---------------------------------------------------------------------------
# PUT /api/ciphers/{id}/partial  – folder and favorite only
# ---------------------------------------------------------------------------


@router.put("/ciphers/{cipher_id}/partial")
def partial_update_cipher(
    cipher_id: str,
    body: PartialCipherRequest,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Folder placement is per user, so read access is enough."""
    cipher = _load_cipher(db, cipher_id, caller)
    _check_folder(db, body.folder_id, caller)

    with transaction(db):
        cipher.favorite = body.favorite
        save_cipher(db, cipher)
        _move(db, cipher, caller, body.folder_id)

    return _serialize(db, cipher, caller)


# ---------------------------------------------------------------------------
# DELETE /api/ciphers/{id}
# ---------------------------------------------------------------------------


@router.delete("/ciphers/{cipher_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_cipher(
    cipher_id: str,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """
    Permanently delete a cipher with its folder links, collection links and
    attachment metadata.  The event is recorded first, while the cipher row
    can still attribute it to its organization.
    """
    cipher = _load_cipher(db, cipher_id, caller, write=True)

    with transaction(db):
        record_event(db, EventType.CIPHER_DELETED, caller, cipher_uuid=cipher.uuid)
        delete_cipher(db, cipher)

    logger.info("Cipher %s deleted by %s", cipher_id, caller.user_uuid)
