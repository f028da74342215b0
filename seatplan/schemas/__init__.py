"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .document import *
from .actions import *
from .arrangement import *
from .transfer import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "EventCreate",
    "EventResponse",
    "PublicEvent",
    "Guest",
    "Seat",
    "Table",
    "Padding",
    "VenueObject",
    "FloorSize",
    "SeatingDocument",
    "empty_document",
    "SeatingAction",
    "parse_actions",
    "ArrangeOptions",
    "ArrangeRequest",
    "ArrangementPlan",
    "ResizeProposal",
    "ImportResult",
    "ImportedGuest",
]
