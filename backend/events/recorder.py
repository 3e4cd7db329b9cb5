# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Audit events – enrichment, persistence and lookup.

An event that names a cipher takes its organization / owner attribution
from the cipher row when that row still exists, so a client that only knows
the cipher id still produces an organization-scoped event.  Events are
written with an upsert on ``uuid``: re-sending the same event replaces the
row instead of duplicating it.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import StoreFailureError
from core.security import Caller
from core.timeutil import format_date, parse_date, utcnow
from events.schemas import EventOccurrence
from models.cipher import Cipher
from models.event import Event


@dataclass
class CollectResult:
    """Outcome of one ``/events/collect`` batch."""

    recorded: list[str] = field(default_factory=list)           # event uuids
    rejected: list[tuple[int, str]] = field(default_factory=list)  # (index, reason)


def new_event(event_type: int, event_date: Optional[datetime] = None) -> Event:
    return Event(
        uuid=str(uuid.uuid4()),
        event_type=int(event_type),
        event_date=event_date or utcnow(),
    )


def save_event(db: Session, event: Event) -> Event:
    """Upsert by primary key."""
    try:
        merged = db.merge(event)
        db.flush()
    except SQLAlchemyError as exc:
        raise StoreFailureError("Error saving event") from exc
    return merged


def record_event(
    db: Session,
    event_type: int,
    caller: Caller,
    event_date: Optional[datetime] = None,
    cipher_uuid: Optional[str] = None,
) -> Event:
    """
    Build, enrich and persist one event.

    * *cipher_uuid* known → org / cipher / user come from the cipher row.
    * *cipher_uuid* unknown (deleted, never existed) → the raw id is kept,
      org and user stay empty.
    * Acting user, device type and IP always come from *caller*.
    """
    event = new_event(event_type, event_date)

    if cipher_uuid is not None:
        cipher = db.query(Cipher).filter(Cipher.uuid == cipher_uuid).first()
        if cipher is not None:
            event.org_uuid = cipher.organization_uuid
            event.cipher_uuid = cipher.uuid
            event.user_uuid = cipher.user_uuid
        else:
            event.cipher_uuid = cipher_uuid

    event.act_user_uuid = caller.user_uuid
    event.device_type = caller.device_type
    event.ip_address = caller.ip_address
    return save_event(db, event)


def _store_unavailable(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def collect_events(db: Session, items: Iterable[Any], caller: Caller) -> CollectResult:
    """
    Record a client-submitted batch.  *items* are raw JSON objects (or
    already validated :class:`EventOccurrence` instances); each one is
    validated on its own and runs in its own SAVEPOINT.  A malformed item,
    a bad date or a rejected row drops that item only.  Losing the database
    aborts the whole batch with StoreFailureError.
    """
    result = CollectResult()

    for index, item in enumerate(items):
        try:
            occurrence = EventOccurrence.model_validate(item)
        except ValidationError as exc:
            result.rejected.append((index, f"invalid item: {exc.error_count()} error(s)"))
            continue

        try:
            event_date = parse_date(occurrence.date)
        except ValueError:
            result.rejected.append((index, f"malformed date {occurrence.date!r}"))
            continue

        try:
            with db.begin_nested():
                event = record_event(
                    db,
                    occurrence.type,
                    caller,
                    event_date=event_date,
                    cipher_uuid=occurrence.cipher_id,
                )
        except StoreFailureError as exc:
            cause = exc.__cause__
            if isinstance(cause, SQLAlchemyError) and not _store_unavailable(cause):
                result.rejected.append((index, exc.message))
                continue
            raise
        except SQLAlchemyError as exc:
            if not _store_unavailable(exc):
                result.rejected.append((index, exc.__class__.__name__))
                continue
            raise StoreFailureError("Event store unavailable") from exc

        result.recorded.append(event.uuid)

    return result


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def find_by_organization(db: Session, org_uuid: str, start: datetime, end: datetime) -> list[Event]:
    return (
        db.query(Event)
        .filter(Event.org_uuid == org_uuid)
        .filter(Event.event_date.between(start, end))
        .order_by(Event.event_date.desc())
        .all()
    )


def find_by_cipher(db: Session, cipher_uuid: str, start: datetime, end: datetime) -> list[Event]:
    return (
        db.query(Event)
        .filter(Event.cipher_uuid == cipher_uuid)
        .filter(Event.event_date.between(start, end))
        .order_by(Event.event_date.desc())
        .all()
    )


def event_to_json(event: Event) -> dict:
    return {
        "Type": event.event_type,
        "UserId": event.user_uuid,
        "OrganizationId": event.org_uuid,
        "CipherId": event.cipher_uuid,
        "CollectionId": event.collection_uuid,
        "GroupId": event.group_uuid,
        "OrganizationUserId": event.org_user_uuid,
        "ActingUserId": event.act_user_uuid,
        "Date": format_date(event.event_date),
        "DeviceType": event.device_type,
        "IpAddress": event.ip_address,
    }
