# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Cipher lifecycle – create, save, delete, and the read-side projection.

Deletion order
--------------
The store enforces no cascade, so :func:`delete_cipher` removes the rows
that point at a cipher before the cipher itself:

    1. folder links        (every user's)
    2. collection links
    3. attachment metadata
    4. the cipher row

A failing step raises and the remaining steps never run.  Callers wrap the
call in ``database.transaction`` so the whole sequence rolls back together.
"""

import json
import uuid
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from access.resolver import collections_for
from core.errors import StoreFailureError
from core.timeutil import format_date, utcnow
from models.attachment import Attachment
from models.cipher import Cipher, CipherType
from models.collection import CollectionCipher
from models.folder import FolderCipher
from vault.folders import get_folder_uuid
from vault.schemas import TYPE_KEYS, CipherRequest


# ---------------------------------------------------------------------------
# Create / update
# ---------------------------------------------------------------------------


def new_cipher(
    cipher_type: CipherType,
    name: str,
    user_uuid: Optional[str] = None,
    organization_uuid: Optional[str] = None,
) -> Cipher:
    """
    Build an unsaved cipher.  Exactly one owner must be given; the model
    raises ``ValueError`` otherwise.  ``data`` starts as an empty object
    until :func:`apply_cipher_data` fills it.
    """
    now = utcnow()
    return Cipher(
        uuid=str(uuid.uuid4()),
        created_at=now,
        updated_at=now,
        user_uuid=user_uuid,
        organization_uuid=organization_uuid,
        atype=int(cipher_type),
        name=name,
        notes=None,
        fields=None,
        data="{}",
        favorite=False,
    )


def apply_cipher_data(cipher: Cipher, body: CipherRequest) -> None:
    """Copy the client-supplied (encrypted) values onto *cipher*."""
    cipher.name = body.name
    cipher.notes = body.notes
    cipher.favorite = body.favorite
    cipher.fields = json.dumps(body.fields) if body.fields is not None else None
    cipher.data = json.dumps(body.type_block().model_dump(by_alias=True))


def save_cipher(db: Session, cipher: Cipher) -> Cipher:
    """Persist *cipher*; the revision date moves forward on every save."""
    cipher.updated_at = utcnow()
    try:
        db.add(cipher)
        db.flush()
    except SQLAlchemyError as exc:
        raise StoreFailureError("Error saving cipher") from exc
    return cipher


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def _delete_folder_links(db: Session, cipher_uuid: str) -> None:
    db.query(FolderCipher).filter(FolderCipher.cipher_uuid == cipher_uuid).delete(
        synchronize_session=False
    )


def _delete_collection_links(db: Session, cipher_uuid: str) -> None:
    db.query(CollectionCipher).filter(CollectionCipher.cipher_uuid == cipher_uuid).delete(
        synchronize_session=False
    )


def _delete_attachments(db: Session, cipher_uuid: str) -> None:
    db.query(Attachment).filter(Attachment.cipher_uuid == cipher_uuid).delete(
        synchronize_session=False
    )


def delete_cipher(db: Session, cipher: Cipher) -> None:
    cipher_uuid = cipher.uuid
    steps = (
        ("folder links", _delete_folder_links),
        ("collection links", _delete_collection_links),
        ("attachments", _delete_attachments),
    )
    for label, step in steps:
        try:
            step(db, cipher_uuid)
        except SQLAlchemyError as exc:
            raise StoreFailureError(f"Error deleting {label} of cipher {cipher_uuid}") from exc

    try:
        db.delete(cipher)
        db.flush()
    except SQLAlchemyError as exc:
        raise StoreFailureError(f"Error deleting cipher {cipher_uuid}") from exc


# ---------------------------------------------------------------------------
# Read-side projection
# ---------------------------------------------------------------------------


def _legacy_login_uri(cipher_type: CipherType, data: dict) -> dict:
    """
    Backwards compatibility for older clients that read a single ``Uri``.

    Login ciphers with a ``Uris`` list also expose the first entry's URI as
    ``Data.Uri``.  Delete this function and its call to drop the shim.
    """
    if cipher_type != CipherType.LOGIN or not isinstance(data.get("Uris"), list):
        return data
    uris = data["Uris"]
    first = uris[0] if uris and isinstance(uris[0], dict) else {}
    data["Uri"] = first.get("Uri", first.get("uri"))
    return data


def serialize_cipher(db: Session, cipher: Cipher, viewer_uuid: str, host: str) -> dict:
    """
    JSON projection of *cipher* as *viewer_uuid* sees it: their folder,
    the collections they qualify for, and the attachment metadata.
    """
    attachments = (
        db.query(Attachment)
        .filter(Attachment.cipher_uuid == cipher.uuid)
        .order_by(Attachment.id)
        .all()
    )
    cipher_type = cipher.cipher_type
    fields = json.loads(cipher.fields) if cipher.fields else None
    data = _legacy_login_uri(cipher_type, json.loads(cipher.data))

    result = {
        "Id": cipher.uuid,
        "Type": int(cipher_type),
        "RevisionDate": format_date(cipher.updated_at),
        "FolderId": get_folder_uuid(db, cipher.uuid, viewer_uuid),
        "Favorite": cipher.favorite,
        "OrganizationId": cipher.organization_uuid,
        "Attachments": [a.to_json(host) for a in attachments],
        "OrganizationUseTotp": False,
        "CollectionIds": sorted(collections_for(db, viewer_uuid, cipher)),
        "Name": cipher.name,
        "Notes": cipher.notes,
        "Fields": fields,
        "Data": data,
        "Object": "cipher",
        # Placeholder until real per-viewer write permission is reported
        "Edit": True,
    }
    result[TYPE_KEYS[cipher_type]] = data
    return result
