"""
Admin API routes - requires authentication
"""

import logging
import secrets
from typing import Any, Dict, List
from fastapi import APIRouter, Body, Depends, UploadFile, File, Query
from fastapi.responses import Response
from pydantic import ValidationError
from sqlalchemy.orm import Session

from seatplan.core.config import settings
from seatplan.core.db import get_db
from seatplan.schemas.actions import AddGuest, SetDocument, parse_actions
from seatplan.schemas.arrangement import ArrangeRequest
from seatplan.schemas.document import Guest, SeatingDocument
from seatplan.schemas.event import EventCreate, EventResponse
from seatplan.services.arrangement_service import ArrangementService
from seatplan.services.excel_service import ExcelService
from seatplan.services.repositories import EventRepo, PersistenceError, get_document_gateway
from seatplan.services.seating_service import SeatingSession, new_id
from seatplan.utils.security import verify_admin_token
from seatplan.utils.responses import success_response, error_response, not_found_error

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

def get_gateway():
    """Persistence gateway for the configured backend"""
    return get_document_gateway()

def _share_url(public_code: str) -> str:
    return f"{settings.BASE_URL}/share/{public_code}"

def _open_session(gateway, event_id: int) -> SeatingSession:
    document = gateway.load(event_id)
    if document is None:
        raise not_found_error("Event")
    return SeatingSession(document)

def _save(gateway, event_id: int, session: SeatingSession, message: str, **data):
    """Persist the session document and build the response"""
    try:
        gateway.save(event_id, session.document)
    except PersistenceError as e:
        logger.error(f"Saving seating for event {event_id} failed: {e}")
        return error_response(
            message="Could not save seating chart",
            error_code="persistence_failed",
            details=str(e),
            status_code=500
        )
    return success_response(
        message=message,
        data={"seating_data": session.document.to_json(), **data}
    )

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Create a new event with an empty seating chart"""
    public_code = secrets.token_urlsafe(8)
    while EventRepo.get_by_public_code_sql(db, public_code):
        public_code = secrets.token_urlsafe(8)

    event = EventRepo.create_sql(
        db,
        title=event_data.title,
        public_code=public_code,
        description=event_data.description,
        event_date=event_data.event_date,
        location=event_data.location,
    )
    logger.info(f"Created event {event.id} ({event.title})")

    return success_response(
        message="Event created successfully",
        data={
            **EventResponse.model_validate(event).model_dump(mode="json"),
            "share_url": _share_url(event.public_code),
        },
        status_code=201
    )

@router.get("/events/{event_id}")
async def get_event_details(
    event_id: int,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Event details with seating statistics"""
    event = EventRepo.get_by_id_sql(db, event_id)
    if not event:
        raise not_found_error("Event")

    session = SeatingSession(SeatingDocument.from_json(event.seating_data or {}))
    return success_response(
        message="Event details retrieved",
        data={
            **EventResponse.model_validate(event).model_dump(mode="json"),
            "share_url": _share_url(event.public_code),
            "seating_summary": session.seating_summary(),
        }
    )

@router.get("/events/{event_id}/seating")
async def get_seating(
    event_id: int,
    gateway=Depends(get_gateway),
    token: str = Depends(verify_admin_token)
):
    """Current seating document"""
    session = _open_session(gateway, event_id)
    return success_response(message="Seating chart retrieved", data=session.document.to_json())

@router.put("/events/{event_id}/seating")
async def replace_seating(
    event_id: int,
    document: SeatingDocument,
    gateway=Depends(get_gateway),
    token: str = Depends(verify_admin_token)
):
    """Replace the whole seating document"""
    session = _open_session(gateway, event_id)
    session.dispatch(SetDocument(document=document))
    return _save(gateway, event_id, session, "Seating chart saved")

@router.post("/events/{event_id}/actions")
async def apply_actions(
    event_id: int,
    payload: List[Dict[str, Any]] = Body(...),
    gateway=Depends(get_gateway),
    token: str = Depends(verify_admin_token)
):
    """Apply a batch of seating actions in order"""
    try:
        actions = parse_actions(payload)
    except ValidationError as e:
        return error_response(
            message="Invalid seating actions",
            error_code="invalid_actions",
            details=[err["msg"] for err in e.errors()],
            status_code=422
        )

    session = _open_session(gateway, event_id)
    changed = session.dispatch_all(actions)
    if changed < len(actions):
        logger.warning(f"{len(actions) - changed} of {len(actions)} actions changed nothing for event {event_id}")
    return _save(gateway, event_id, session, f"{changed} action(s) applied", applied=changed)

@router.post("/events/{event_id}/arrange")
async def arrange_tables(
    event_id: int,
    request: ArrangeRequest,
    preview: bool = Query(False, description="Only return the plan, do not move tables"),
    gateway=Depends(get_gateway),
    token: str = Depends(verify_admin_token)
):
    """Lay out all tables, optionally accepting the proposed floor size"""
    session = _open_session(gateway, event_id)
    plan = ArrangementService.plan(session.document, request)
    proposal = plan.proposal.model_dump() if plan.proposal else None
    if preview:
        return success_response(
            message="Arrangement preview",
            data={"positions": [p.model_dump() for p in plan.positions], "proposal": proposal}
        )

    moved = session.arrange_tables(request, confirm_resize=request.accept_resize)
    return _save(gateway, event_id, session, f"{moved} table(s) arranged", moved=moved, proposal=proposal)

@router.post("/events/{event_id}/auto-seat")
async def auto_seat(
    event_id: int,
    gateway=Depends(get_gateway),
    token: str = Depends(verify_admin_token)
):
    """Seat unassigned guests by party"""
    session = _open_session(gateway, event_id)
    placed = session.auto_seat()
    return _save(
        gateway, event_id, session, f"{placed} guest(s) seated",
        placed=placed, unassigned=len(session.unassigned_guests())
    )

@router.post("/events/{event_id}/import")
async def import_excel(
    event_id: int,
    file: UploadFile = File(...),
    gateway=Depends(get_gateway),
    token: str = Depends(verify_admin_token)
):
    """Import a guest list or a full seating chart from Excel"""
    if not file.filename or not file.filename.endswith(('.xlsx', '.xls')):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(message="File too large", status_code=413)

    session = _open_session(gateway, event_id)
    ok, errors, result = ExcelService.parse_workbook(file_content)
    if not ok:
        return error_response(
            message="Excel file validation failed",
            details=errors,
            status_code=422
        )

    if result.kind == "full":
        session.dispatch(SetDocument(document=result.document))
        imported = len(result.document.guests)
    else:
        for row in result.guests:
            session.dispatch(AddGuest(guest=Guest(id=new_id("guest"), **row.model_dump())))
        imported = len(result.guests)

    return _save(
        gateway, event_id, session, f"Imported {imported} guests",
        kind=result.kind, imported=imported, filename=file.filename
    )

@router.get("/events/{event_id}/export.xlsx")
async def export_excel(
    event_id: int,
    gateway=Depends(get_gateway),
    token: str = Depends(verify_admin_token)
):
    """Export the seating chart to Excel"""
    session = _open_session(gateway, event_id)
    return Response(
        content=ExcelService.export_document(session.document),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=seating_chart_{event_id}.xlsx"}
    )
