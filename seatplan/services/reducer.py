"""
Seating reducer - pure state transitions over the seating document

``apply_action(document, action)`` never mutates its input. When an action
changes nothing (unknown id, value already set, unknown action type) the
very same document object is returned so callers can detect no-ops with an
identity check.
"""

import logging
from typing import Callable, Dict, List, Optional

from seatplan.core.constants import MAX_ZOOM, MIN_ZOOM
from seatplan.schemas.actions import (
    AddGuest,
    AddObject,
    AddTable,
    AssignGuest,
    DeleteGuest,
    DeleteObject,
    DeleteTable,
    SetDocument,
    SetFloorSize,
    SetZoom,
    UnassignGuest,
    UpdateGuest,
    UpdateObject,
    UpdateTable,
)
from seatplan.schemas.document import FloorSize, Guest, Seat, SeatingDocument, Table

logger = logging.getLogger(__name__)

def _index_of(items: list, item_id: str) -> Optional[int]:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return None

def _unseat(guest: Guest) -> Guest:
    return guest.model_copy(update={"table_id": None, "seat_index": None})

def _changes(updates) -> dict:
    """Fields of a partial update that carry a value"""
    return {
        name: getattr(updates, name)
        for name in type(updates).model_fields
        if getattr(updates, name) is not None
    }

def _sync_seat_cache(
    document: SeatingDocument,
    tables: Optional[List[Table]] = None,
    guests: Optional[List[Guest]] = None,
) -> SeatingDocument:
    """Build the next document with every table's seat cache rebuilt from guests"""
    tables = document.tables if tables is None else tables
    guests = document.guests if guests is None else guests

    occupancy = {g.seat: g.id for g in guests if g.seat is not None}
    synced = []
    for table in tables:
        seats = [Seat(guest_id=occupancy.get((table.id, i))) for i in range(len(table.seats))]
        if seats != table.seats:
            table = table.model_copy(update={"seats": seats})
        synced.append(table)

    return document.model_copy(update={"tables": synced, "guests": guests})

# -------- Document --------

def _set_document(document: SeatingDocument, action: SetDocument) -> SeatingDocument:
    if action.document is document:
        return document
    return _sync_seat_cache(action.document)

def _set_zoom(document: SeatingDocument, action: SetZoom) -> SeatingDocument:
    zoom = max(MIN_ZOOM, min(MAX_ZOOM, action.value))
    if zoom == document.zoom:
        return document
    return document.model_copy(update={"zoom": zoom})

def _set_floor_size(document: SeatingDocument, action: SetFloorSize) -> SeatingDocument:
    floor = FloorSize(width=action.width, height=action.height)
    if floor == document.floor_size:
        return document
    return document.model_copy(update={"floor_size": floor})

# -------- Tables --------

def _add_table(document: SeatingDocument, action: AddTable) -> SeatingDocument:
    if _index_of(document.tables, action.table.id) is not None:
        logger.debug("Ignoring duplicate table id %s", action.table.id)
        return document
    return _sync_seat_cache(document, tables=[*document.tables, action.table])

def _update_table(document: SeatingDocument, action: UpdateTable) -> SeatingDocument:
    index = _index_of(document.tables, action.id)
    if index is None:
        return document

    table = document.tables[index]
    changes = _changes(action.updates)
    seat_count = changes.pop("seat_count", None)
    if seat_count is not None and seat_count != table.capacity:
        seats = list(table.seats[:seat_count])
        seats.extend(Seat() for _ in range(seat_count - len(seats)))
        changes["seats"] = seats

    updated = table.model_copy(update=changes)
    if updated == table:
        return document

    tables = list(document.tables)
    tables[index] = updated
    if updated.capacity >= table.capacity:
        return document.model_copy(update={"tables": tables})

    # Guests in seats that no longer exist lose their seat
    guests = [
        _unseat(g) if g.table_id == table.id and g.seat_index >= updated.capacity else g
        for g in document.guests
    ]
    return _sync_seat_cache(document, tables=tables, guests=guests)

def _delete_table(document: SeatingDocument, action: DeleteTable) -> SeatingDocument:
    if _index_of(document.tables, action.id) is None:
        return document
    tables = [t for t in document.tables if t.id != action.id]
    guests = [_unseat(g) if g.table_id == action.id else g for g in document.guests]
    return document.model_copy(update={"tables": tables, "guests": guests})

# -------- Guests --------

def _add_guest(document: SeatingDocument, action: AddGuest) -> SeatingDocument:
    guest = action.guest
    if _index_of(document.guests, guest.id) is not None:
        logger.debug("Ignoring duplicate guest id %s", guest.id)
        return document

    if guest.seat is not None:
        table = document.get_table(guest.table_id)
        taken = any(g.seat == guest.seat for g in document.guests)
        if table is None or guest.seat_index >= table.capacity or taken:
            guest = _unseat(guest)

    return _sync_seat_cache(document, guests=[*document.guests, guest])

def _update_guest(document: SeatingDocument, action: UpdateGuest) -> SeatingDocument:
    index = _index_of(document.guests, action.id)
    if index is None:
        return document

    guest = document.guests[index]
    updated = guest.model_copy(update=_changes(action.updates))
    if updated == guest:
        return document

    guests = list(document.guests)
    guests[index] = updated
    return document.model_copy(update={"guests": guests})

def _delete_guest(document: SeatingDocument, action: DeleteGuest) -> SeatingDocument:
    index = _index_of(document.guests, action.id)
    if index is None:
        return document
    guests = [g for g in document.guests if g.id != action.id]
    if document.guests[index].seat is None:
        return document.model_copy(update={"guests": guests})
    return _sync_seat_cache(document, guests=guests)

def _assign_guest(document: SeatingDocument, action: AssignGuest) -> SeatingDocument:
    guest = document.get_guest(action.guest_id)
    table = document.get_table(action.table_id)
    if guest is None or table is None or action.seat_index >= table.capacity:
        logger.debug(
            "Ignoring assignment of %s to %s[%s]",
            action.guest_id, action.table_id, action.seat_index,
        )
        return document

    target = (action.table_id, action.seat_index)
    if guest.seat == target:
        return document

    guests = []
    for g in document.guests:
        if g.id == action.guest_id:
            g = g.model_copy(update={"table_id": action.table_id, "seat_index": action.seat_index})
        elif g.seat == target:
            # Swap-out: the previous occupant is unseated, not moved
            g = _unseat(g)
        guests.append(g)

    return _sync_seat_cache(document, guests=guests)

def _unassign_guest(document: SeatingDocument, action: UnassignGuest) -> SeatingDocument:
    index = _index_of(document.guests, action.guest_id)
    if index is None or document.guests[index].seat is None:
        return document
    guests = list(document.guests)
    guests[index] = _unseat(guests[index])
    return _sync_seat_cache(document, guests=guests)

# -------- Venue objects --------

def _add_object(document: SeatingDocument, action: AddObject) -> SeatingDocument:
    if document.get_object(action.venue_object.id) is not None:
        return document
    return document.model_copy(update={"objects": [*document.objects, action.venue_object]})

def _update_object(document: SeatingDocument, action: UpdateObject) -> SeatingDocument:
    index = _index_of(document.objects, action.id)
    if index is None:
        return document

    obj = document.objects[index]
    updated = obj.model_copy(update=_changes(action.updates))
    if updated == obj:
        return document

    objects = list(document.objects)
    objects[index] = updated
    return document.model_copy(update={"objects": objects})

def _delete_object(document: SeatingDocument, action: DeleteObject) -> SeatingDocument:
    if document.get_object(action.id) is None:
        return document
    return document.model_copy(update={"objects": [o for o in document.objects if o.id != action.id]})

_HANDLERS: Dict[str, Callable] = {
    "SET_DOCUMENT": _set_document,
    "ADD_TABLE": _add_table,
    "UPDATE_TABLE": _update_table,
    "DELETE_TABLE": _delete_table,
    "ADD_GUEST": _add_guest,
    "UPDATE_GUEST": _update_guest,
    "DELETE_GUEST": _delete_guest,
    "ASSIGN_GUEST": _assign_guest,
    "UNASSIGN_GUEST": _unassign_guest,
    "ADD_OBJECT": _add_object,
    "UPDATE_OBJECT": _update_object,
    "DELETE_OBJECT": _delete_object,
    "SET_ZOOM": _set_zoom,
    "SET_FLOOR_SIZE": _set_floor_size,
}

def apply_action(document: SeatingDocument, action) -> SeatingDocument:
    """Return the document that results from applying ``action``"""
    handler = _HANDLERS.get(getattr(action, "type", None))
    if handler is None:
        return document
    return handler(document, action)
