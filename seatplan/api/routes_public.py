"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from seatplan.core.constants import (
    DIETARY_OPTIONS,
    FLOOR_PRESETS,
    MEAL_OPTIONS,
    PIXELS_PER_FOOT,
    TABLE_COLORS,
    VENUE_OBJECT_TYPES,
)
from seatplan.core.db import get_db
from seatplan.schemas.event import PublicEvent
from seatplan.services.excel_service import ExcelService
from seatplan.services.repositories import EventRepo
from seatplan.utils.security import rate_limit_check, get_client_ip
from seatplan.utils.responses import success_response, not_found_error, rate_limit_error

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/options")
async def seating_options():
    """Choice lists and presets for the seating editor"""
    return success_response(
        message="Seating options retrieved",
        data={
            "meals": MEAL_OPTIONS,
            "dietary": DIETARY_OPTIONS,
            "table_colors": TABLE_COLORS,
            "floor_presets": FLOOR_PRESETS,
            "object_types": [
                {"type": object_type, "label": label, "width": width, "height": height}
                for object_type, (label, width, height) in VENUE_OBJECT_TYPES.items()
            ],
            "pixels_per_foot": PIXELS_PER_FOOT,
        }
    )

@router.get("/template.xlsx")
async def download_template():
    """Download the guest-list Excel template"""
    return Response(
        content=ExcelService.create_template(),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=guest_list_template.xlsx"}
    )

@router.get("/share/{public_code}")
async def shared_seating(
    public_code: str,
    request: Request,
    db: Session = Depends(get_db)
):
    """Read-only seating chart for a shared link"""
    if not rate_limit_check(get_client_ip(request)):
        raise rate_limit_error()

    event = EventRepo.get_by_public_code_sql(db, public_code)
    if not event:
        raise not_found_error("Event")

    return success_response(
        message="Seating chart retrieved",
        data=PublicEvent.model_validate(event).model_dump(mode="json")
    )
