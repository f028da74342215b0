"""
Seating session - the editable state of one seating chart
"""

import logging
import uuid
from typing import Callable, Dict, List, Optional

from seatplan.core.constants import (
    DEFAULT_MEAL,
    DEFAULT_SEAT_COUNT,
    MAX_ZOOM,
    MIN_ZOOM,
    TABLE_COLORS,
    VENUE_OBJECT_TYPES,
)
from seatplan.schemas.actions import (
    AddGuest,
    AddObject,
    AddTable,
    AssignGuest,
    DeleteGuest,
    DeleteObject,
    DeleteTable,
    GuestUpdate,
    ObjectUpdate,
    SetDocument,
    SetFloorSize,
    SetZoom,
    TableUpdate,
    UnassignGuest,
    UpdateGuest,
    UpdateObject,
    UpdateTable,
)
from seatplan.schemas.arrangement import ArrangeOptions
from seatplan.schemas.document import (
    Guest,
    Padding,
    Seat,
    SeatingDocument,
    Table,
    VenueObject,
    empty_document,
)
from seatplan.services.arrangement_service import ArrangementService, ConfirmResize
from seatplan.services.autosave import AutoSaver
from seatplan.services.autoseat_service import AutoSeatService
from seatplan.services.history import HistoryManager

logger = logging.getLogger(__name__)

def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"

class SeatingSession:
    """Undoable seating chart owned by its caller.

    Sessions share nothing: each has its own history and, when ``on_save`` is
    given, its own debounced auto-saver that receives every settled document.
    """

    def __init__(
        self,
        document: Optional[SeatingDocument] = None,
        on_save: Optional[Callable[[SeatingDocument], None]] = None,
        autosave_delay: Optional[float] = None,
        on_save_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.history = HistoryManager(document if document is not None else empty_document())
        self.autosaver = (
            AutoSaver(on_save, delay=autosave_delay, on_error=on_save_error)
            if on_save is not None
            else None
        )

    # -------- State --------

    @property
    def document(self) -> SeatingDocument:
        return self.history.present

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def _changed(self) -> None:
        if self.autosaver is not None:
            self.autosaver.schedule(self.history.present)

    def dispatch(self, action) -> bool:
        changed = self.history.dispatch(action)
        if changed:
            self._changed()
        return changed

    def dispatch_all(self, actions) -> int:
        """Dispatch actions in order; returns how many changed the document"""
        return sum(1 for action in actions if self.dispatch(action))

    def undo(self) -> bool:
        changed = self.history.undo()
        if changed:
            self._changed()
        return changed

    def redo(self) -> bool:
        changed = self.history.redo()
        if changed:
            self._changed()
        return changed

    def flush(self) -> bool:
        """Save the pending document immediately"""
        return self.autosaver.flush() if self.autosaver is not None else False

    def close(self) -> None:
        self.flush()

    # -------- Tables --------

    def add_table(self, seat_count: int = DEFAULT_SEAT_COUNT, name: Optional[str] = None) -> Table:
        count = len(self.document.tables)
        table = Table(
            id=new_id("table"),
            name=name or f"Table {count + 1}",
            x=100 + (count % 4) * 150,
            y=100 + (count // 4) * 150,
            seats=[Seat() for _ in range(seat_count)],
            color=TABLE_COLORS[count % len(TABLE_COLORS)],
        )
        self.dispatch(AddTable(table=table))
        return table

    def update_table(self, table_id: str, **fields) -> bool:
        return self.dispatch(UpdateTable(id=table_id, updates=TableUpdate(**fields)))

    def delete_table(self, table_id: str) -> bool:
        return self.dispatch(DeleteTable(id=table_id))

    # -------- Guests --------

    def add_guest(
        self,
        name: str,
        group: str = "",
        meal: str = DEFAULT_MEAL,
        dietary: Optional[List[str]] = None,
    ) -> Guest:
        guest = Guest(id=new_id("guest"), name=name, group=group, meal=meal, dietary=dietary or [])
        self.dispatch(AddGuest(guest=guest))
        return guest

    def update_guest(self, guest_id: str, **fields) -> bool:
        return self.dispatch(UpdateGuest(id=guest_id, updates=GuestUpdate(**fields)))

    def delete_guest(self, guest_id: str) -> bool:
        return self.dispatch(DeleteGuest(id=guest_id))

    def assign_guest(self, guest_id: str, table_id: str, seat_index: int) -> bool:
        return self.dispatch(AssignGuest(guest_id=guest_id, table_id=table_id, seat_index=seat_index))

    def unassign_guest(self, guest_id: str) -> bool:
        return self.dispatch(UnassignGuest(guest_id=guest_id))

    # -------- Venue objects --------

    def add_object(
        self,
        object_type: str = "custom",
        label: Optional[str] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        x: Optional[float] = None,
        y: Optional[float] = None,
        color: str = "",
        padding: Optional[Padding] = None,
    ) -> VenueObject:
        default_label, default_width, default_height = VENUE_OBJECT_TYPES[object_type]
        count = len(self.document.objects)
        obj = VenueObject(
            id=new_id("object"),
            type=object_type,
            label=label or default_label,
            x=100 + count * 20 if x is None else x,
            y=100 + count * 20 if y is None else y,
            width=default_width if width is None else width,
            height=default_height if height is None else height,
            color=color,
            padding=padding,
        )
        self.dispatch(AddObject(venue_object=obj))
        return obj

    def update_object(self, object_id: str, **fields) -> bool:
        return self.dispatch(UpdateObject(id=object_id, updates=ObjectUpdate(**fields)))

    def delete_object(self, object_id: str) -> bool:
        return self.dispatch(DeleteObject(id=object_id))

    # -------- View and floor --------

    def set_zoom(self, zoom: float) -> bool:
        return self.dispatch(SetZoom(value=zoom))

    def set_floor_size(self, width: float, height: float) -> bool:
        return self.dispatch(SetFloorSize(width=width, height=height))

    def set_document(self, document: SeatingDocument) -> bool:
        return self.dispatch(SetDocument(document=document))

    def zoom_to_fit(self, container_width: float, container_height: float) -> float:
        """Largest zoom that shows the whole floor in the container"""
        floor = self.document.floor_size
        zoom = min(container_width / floor.width, container_height / floor.height, MAX_ZOOM)
        zoom = max(MIN_ZOOM, round(zoom, 2))
        self.set_zoom(zoom)
        return self.document.zoom

    # -------- Queries --------

    def unassigned_guests(self) -> List[Guest]:
        return self.document.unassigned_guests()

    def get_guest(self, guest_id: str) -> Optional[Guest]:
        return self.document.get_guest(guest_id)

    def get_table(self, table_id: str) -> Optional[Table]:
        return self.document.get_table(table_id)

    def table_guests(self, table_id: str) -> List[Guest]:
        """Guests at a table ordered by seat"""
        guests = [g for g in self.document.guests if g.table_id == table_id]
        return sorted(guests, key=lambda g: g.seat_index)

    def seating_summary(self) -> Dict:
        """Per-table and overall seating counts"""
        document = self.document
        tables = []
        for table in document.tables:
            seated = self.table_guests(table.id)
            tables.append({
                "table_id": table.id,
                "table_name": table.name,
                "capacity": table.capacity,
                "assigned": len(seated),
                "available_seats": table.capacity - len(seated),
                "guests": [g.name for g in seated],
            })

        unassigned = len(document.unassigned_guests())
        return {
            "total_guests": len(document.guests),
            "assigned_guests": len(document.guests) - unassigned,
            "unassigned_guests": unassigned,
            "total_tables": len(document.tables),
            "total_seats": sum(t.capacity for t in document.tables),
            "tables": tables,
        }

    # -------- Engines --------

    def arrange_tables(
        self,
        options: Optional[ArrangeOptions] = None,
        confirm_resize: ConfirmResize = False,
    ) -> int:
        """Lay out every table; returns the number of tables moved"""
        actions = ArrangementService.arrangement_actions(
            self.document, options or ArrangeOptions(), confirm_resize
        )
        moved = 0
        for action in actions:
            if self.dispatch(action) and action.type == "UPDATE_TABLE":
                moved += 1
        return moved

    def auto_seat(self) -> int:
        """Seat unassigned guests by party; returns the number placed"""
        actions = AutoSeatService.auto_seat_actions(self.document)
        placed = self.dispatch_all(actions)
        logger.info(f"Auto-seated {placed} guest(s)")
        return placed
