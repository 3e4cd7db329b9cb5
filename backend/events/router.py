# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Event endpoints – organization / cipher event listings, the Excel export of
an organization's events, and the client event collector.

Listings return the standard list envelope.  ``ContinuationToken`` is
accepted but ignored and always returned as null: results are not paged.
"""

import io
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from sqlalchemy.orm import Session

from access.membership import is_admin_or_owner
from access.resolver import can_read
from core.errors import PermissionDeniedError
from core.logger import logger
from core.schemas import ListResponse
from core.security import Caller, get_current_caller
from core.timeutil import format_date, parse_date
from database import get_db, transaction
from events.recorder import collect_events, event_to_json, find_by_cipher, find_by_organization
from models.cipher import Cipher
from models.event import Event, EventType

router = APIRouter(prefix="/api", tags=["events"])
collect_router = APIRouter(prefix="/events", tags=["events"])


def _date_range(start: str, end: str) -> tuple[datetime, datetime]:
    try:
        return parse_date(start), parse_date(end)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start and end must be ISO-8601 dates",
        )


def _require_org_admin(db: Session, caller: Caller, org_id: str) -> None:
    if not is_admin_or_owner(db, caller.user_uuid, org_id):
        raise PermissionDeniedError("Organization admin access required")


def _tied_to_caller(db: Session, caller: Caller, event: Event) -> bool:
    """The caller performed *event*, or administers its organization."""
    if event.act_user_uuid == caller.user_uuid:
        return True
    return event.org_uuid is not None and is_admin_or_owner(db, caller.user_uuid, event.org_uuid)


# ---------------------------------------------------------------------------
# GET /api/organizations/{org_id}/events
# ---------------------------------------------------------------------------


@router.get("/organizations/{org_id}/events", response_model=ListResponse)
def get_org_events(
    org_id: str,
    start: str,
    end: str,
    continuation_token: Optional[str] = Query(None, alias="continuationToken"),
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Events attributed to the organization, newest first.  Owner/Admin only."""
    _require_org_admin(db, caller, org_id)
    start_date, end_date = _date_range(start, end)

    events = find_by_organization(db, org_id, start_date, end_date)
    return ListResponse(Data=[event_to_json(e) for e in events])


# ---------------------------------------------------------------------------
# GET /api/organizations/{org_id}/events/export  – Excel download
# ---------------------------------------------------------------------------

_HEADER_FONT  = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
_HEADER_FILL  = PatternFill(start_color="6C63FF", end_color="6C63FF", fill_type="solid")
_HEADER_ALIGN = Alignment(horizontal="center", vertical="center")
_THIN_BORDER  = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)

_EXPORT_HEADERS = ["Date", "Event", "Acting User", "User", "Cipher", "Collection", "Device Type", "IP Address"]
_EXPORT_COL_MIN = [28, 36, 38, 38, 38, 38, 12, 18]


def _event_label(code: int) -> str:
    try:
        return EventType(code).name.lower()
    except ValueError:
        return str(code)


@router.get("/organizations/{org_id}/events/export")
def export_org_events(
    org_id: str,
    start: str,
    end: str,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Same rows as the listing, as an .xlsx workbook streamed from memory."""
    _require_org_admin(db, caller, org_id)
    start_date, end_date = _date_range(start, end)
    events = find_by_organization(db, org_id, start_date, end_date)

    wb = Workbook()
    ws = wb.active
    ws.title = "Events"

    ws.append(_EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _HEADER_ALIGN
        cell.border = _THIN_BORDER

    for event in events:
        ws.append([
            format_date(event.event_date),
            _event_label(event.event_type),
            event.act_user_uuid or "",
            event.user_uuid or "",
            event.cipher_uuid or "",
            event.collection_uuid or "",
            event.device_type if event.device_type is not None else "",
            event.ip_address or "",
        ])
        row_idx = ws.max_row
        for col_idx in range(1, len(_EXPORT_HEADERS) + 1):
            ws.cell(row=row_idx, column=col_idx).border = _THIN_BORDER

    for col_idx, min_w in enumerate(_EXPORT_COL_MIN, start=1):
        ws.column_dimensions[chr(64 + col_idx)].width = min_w

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    wb.close()

    logger.info("Exported %d event(s) of org %s for user %s", len(events), org_id, caller.user_uuid)

    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="events-{org_id}.xlsx"'},
    )


# ---------------------------------------------------------------------------
# GET /api/ciphers/{cipher_id}/events
# ---------------------------------------------------------------------------


@router.get("/ciphers/{cipher_id}/events", response_model=ListResponse)
def get_cipher_events(
    cipher_id: str,
    start: str,
    end: str,
    continuation_token: Optional[str] = Query(None, alias="continuationToken"),
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """
    Events recorded against one cipher.  A live cipher needs read access.
    Once the cipher is deleted its events are still listed, limited to the
    ones the caller performed or whose organization the caller administers.
    """
    cipher = db.query(Cipher).filter(Cipher.uuid == cipher_id).first()
    if cipher is not None and not can_read(db, caller.user_uuid, cipher):
        raise PermissionDeniedError("Cipher is not accessible")
    start_date, end_date = _date_range(start, end)

    events = find_by_cipher(db, cipher_id, start_date, end_date)
    if cipher is None:
        events = [e for e in events if _tied_to_caller(db, caller, e)]
    return ListResponse(Data=[event_to_json(e) for e in events])


# ---------------------------------------------------------------------------
# POST /events/collect
# ---------------------------------------------------------------------------


@collect_router.post("/collect")
def post_events_collect(
    body: List[Any] = Body(...),
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """
    Store events reported by a client.  Items that fail validation or carry
    a bad date are skipped (and logged); the rest of the batch is still
    recorded.
    """
    with transaction(db):
        result = collect_events(db, body, caller)

    for index, reason in result.rejected:
        logger.warning("Event collect: item %d from user %s skipped: %s", index, caller.user_uuid, reason)
    logger.info(
        "Event collect: %d recorded, %d skipped | user=%s ip=%s",
        len(result.recorded),
        len(result.rejected),
        caller.user_uuid,
        caller.ip_address,
    )
    return Response(status_code=status.HTTP_200_OK)
