"""
Seating actions and partial-update records

Each action is a small model tagged by ``type`` so a list of actions can be
posted as JSON and parsed through the ``SeatingAction`` discriminated union.
"""

from typing import Annotated, List, Literal, Optional, Union
from pydantic import Field, TypeAdapter

from seatplan.schemas.document import (
    DocumentModel,
    Guest,
    Padding,
    SeatingDocument,
    Table,
    VenueObject,
    VenueObjectType,
)

# -------- Partial updates --------

class TableUpdate(DocumentModel):
    """Fields of a table that can be changed in place"""
    name: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    color: Optional[str] = None
    seat_count: Optional[int] = Field(default=None, alias="seatCount", ge=0)

class GuestUpdate(DocumentModel):
    """Fields of a guest that can be changed in place (seating goes through AssignGuest)"""
    name: Optional[str] = Field(default=None, min_length=1)
    group: Optional[str] = None
    meal: Optional[str] = None
    dietary: Optional[List[str]] = None

class ObjectUpdate(DocumentModel):
    """Fields of a venue object that can be changed in place"""
    type: Optional[VenueObjectType] = None
    label: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    color: Optional[str] = None
    padding: Optional[Padding] = None

# -------- Actions --------

class SetDocument(DocumentModel):
    type: Literal["SET_DOCUMENT"] = "SET_DOCUMENT"
    document: SeatingDocument

class AddTable(DocumentModel):
    type: Literal["ADD_TABLE"] = "ADD_TABLE"
    table: Table

class UpdateTable(DocumentModel):
    type: Literal["UPDATE_TABLE"] = "UPDATE_TABLE"
    id: str
    updates: TableUpdate

class DeleteTable(DocumentModel):
    type: Literal["DELETE_TABLE"] = "DELETE_TABLE"
    id: str

class AddGuest(DocumentModel):
    type: Literal["ADD_GUEST"] = "ADD_GUEST"
    guest: Guest

class UpdateGuest(DocumentModel):
    type: Literal["UPDATE_GUEST"] = "UPDATE_GUEST"
    id: str
    updates: GuestUpdate

class DeleteGuest(DocumentModel):
    type: Literal["DELETE_GUEST"] = "DELETE_GUEST"
    id: str

class AssignGuest(DocumentModel):
    type: Literal["ASSIGN_GUEST"] = "ASSIGN_GUEST"
    guest_id: str = Field(alias="guestId")
    table_id: str = Field(alias="tableId")
    seat_index: int = Field(alias="seatIndex", ge=0)

class UnassignGuest(DocumentModel):
    type: Literal["UNASSIGN_GUEST"] = "UNASSIGN_GUEST"
    guest_id: str = Field(alias="guestId")

class AddObject(DocumentModel):
    type: Literal["ADD_OBJECT"] = "ADD_OBJECT"
    venue_object: VenueObject = Field(alias="object")

class UpdateObject(DocumentModel):
    type: Literal["UPDATE_OBJECT"] = "UPDATE_OBJECT"
    id: str
    updates: ObjectUpdate

class DeleteObject(DocumentModel):
    type: Literal["DELETE_OBJECT"] = "DELETE_OBJECT"
    id: str

class SetZoom(DocumentModel):
    type: Literal["SET_ZOOM"] = "SET_ZOOM"
    value: float

class SetFloorSize(DocumentModel):
    type: Literal["SET_FLOOR_SIZE"] = "SET_FLOOR_SIZE"
    width: float = Field(gt=0)
    height: float = Field(gt=0)

SeatingAction = Annotated[
    Union[
        SetDocument,
        AddTable,
        UpdateTable,
        DeleteTable,
        AddGuest,
        UpdateGuest,
        DeleteGuest,
        AssignGuest,
        UnassignGuest,
        AddObject,
        UpdateObject,
        DeleteObject,
        SetZoom,
        SetFloorSize,
    ],
    Field(discriminator="type"),
]

# View and floor negotiation state; never recorded in undo history
NON_UNDOABLE_ACTIONS = frozenset({"SET_ZOOM", "SET_FLOOR_SIZE"})

_action_list = TypeAdapter(List[SeatingAction])

def parse_actions(payload: list) -> list:
    """Validate a JSON list of actions"""
    return _action_list.validate_python(payload)
