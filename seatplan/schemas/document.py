"""
Seating document schemas

The document is the single aggregate persisted per event. Every model is
frozen: the reducer produces new values with ``model_copy`` and never edits
one in place. JSON keys use the camelCase names the floor-plan client
exchanges (``tableId``, ``seatIndex``, ``floorSize``); python code uses the
snake_case attribute names.
"""

from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, model_validator

from seatplan.core.config import settings
from seatplan.core.constants import DEFAULT_MEAL

VenueObjectType = Literal[
    "stage",
    "bar",
    "dancefloor",
    "entrance",
    "buffet",
    "dj",
    "photobooth",
    "restrooms",
    "kitchen",
    "custom",
]

class DocumentModel(BaseModel):
    """Base for all document parts"""

    class Config:
        frozen = True
        populate_by_name = True

class Seat(DocumentModel):
    """Seat slot; guest_id is a display cache kept in sync by the reducer"""
    guest_id: Optional[str] = Field(default=None, alias="guestId")

class Guest(DocumentModel):
    """A guest and their optional seat"""
    id: str
    name: str = Field(min_length=1)
    group: str = ""
    meal: str = DEFAULT_MEAL
    dietary: List[str] = Field(default_factory=list)
    table_id: Optional[str] = Field(default=None, alias="tableId")
    seat_index: Optional[int] = Field(default=None, alias="seatIndex", ge=0)

    @model_validator(mode="after")
    def check_seat_pairing(self):
        if (self.table_id is None) != (self.seat_index is None):
            raise ValueError("tableId and seatIndex must both be set or both be null")
        return self

    @property
    def seat(self) -> Optional[Tuple[str, int]]:
        if self.table_id is None:
            return None
        return (self.table_id, self.seat_index)

class Table(DocumentModel):
    """Round table; (x, y) is the center point"""
    id: str
    name: str
    x: float = 0
    y: float = 0
    seats: List[Seat] = Field(default_factory=list)
    color: str = ""

    @property
    def capacity(self) -> int:
        return len(self.seats)

class Padding(DocumentModel):
    """Per-side exclusion margin around a venue object"""
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0

class VenueObject(DocumentModel):
    """Venue fixture; (x, y) is the top-left corner"""
    id: str
    type: VenueObjectType = "custom"
    label: str = ""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    color: str = ""
    padding: Optional[Padding] = None

class FloorSize(DocumentModel):
    width: float = settings.DEFAULT_FLOOR_WIDTH
    height: float = settings.DEFAULT_FLOOR_HEIGHT

class SeatingDocument(DocumentModel):
    """Whole seating chart for one event"""
    tables: List[Table] = Field(default_factory=list)
    guests: List[Guest] = Field(default_factory=list)
    objects: List[VenueObject] = Field(default_factory=list)
    floor_size: FloorSize = Field(default_factory=FloorSize, alias="floorSize")
    zoom: float = 1

    @model_validator(mode="after")
    def check_seat_exclusivity(self):
        taken = set()
        for guest in self.guests:
            if guest.seat is None:
                continue
            if guest.seat in taken:
                raise ValueError(
                    f"Seat {guest.seat_index} of table '{guest.table_id}' is assigned twice"
                )
            taken.add(guest.seat)
        return self

    def to_json(self) -> dict:
        """JSON-serializable tree with camelCase keys and explicit nulls"""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_json(cls, data: dict) -> "SeatingDocument":
        return cls.model_validate(data)

    def get_table(self, table_id: str) -> Optional[Table]:
        return next((t for t in self.tables if t.id == table_id), None)

    def get_guest(self, guest_id: str) -> Optional[Guest]:
        return next((g for g in self.guests if g.id == guest_id), None)

    def get_object(self, object_id: str) -> Optional[VenueObject]:
        return next((o for o in self.objects if o.id == object_id), None)

    def unassigned_guests(self) -> List[Guest]:
        return [g for g in self.guests if g.table_id is None]

def empty_document() -> SeatingDocument:
    """Default document for a newly created event"""
    return SeatingDocument()
