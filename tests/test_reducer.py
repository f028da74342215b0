"""
Tests for the seating reducer
"""

import pytest

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
    parse_actions,
)
from seatplan.schemas.document import Guest, Padding, Seat, SeatingDocument, Table, VenueObject
from seatplan.services.reducer import apply_action

def make_table(table_id, seats=8, x=0, y=0):
    return Table(id=table_id, name=table_id.upper(), x=x, y=y, seats=[Seat() for _ in range(seats)])

def make_guest(guest_id, group="", table_id=None, seat_index=None):
    return Guest(id=guest_id, name=guest_id.title(), group=group, table_id=table_id, seat_index=seat_index)

@pytest.fixture
def document():
    """Two tables, three guests, g1 seated at t1 seat 0"""
    return SeatingDocument(
        tables=[make_table("t1"), make_table("t2", seats=4)],
        guests=[make_guest("g1", table_id="t1", seat_index=0), make_guest("g2"), make_guest("g3")],
        objects=[VenueObject(id="o1", type="stage", label="Stage", width=200, height=80)],
    )

def seats_of(document):
    return [g.seat for g in document.guests if g.seat is not None]

def test_assign_swap_out_scenario(document):
    """Assigning into an occupied seat unseats the occupant"""
    doc = apply_action(document, AssignGuest(guest_id="g2", table_id="t1", seat_index=0))

    g1 = doc.get_guest("g1")
    g2 = doc.get_guest("g2")
    assert g1.table_id is None
    assert g1.seat_index is None
    assert g2.seat == ("t1", 0)

def test_assign_moves_guest_and_vacates_old_seat(document):
    doc = apply_action(document, AssignGuest(guest_id="g1", table_id="t2", seat_index=3))

    assert doc.get_guest("g1").seat == ("t2", 3)
    assert doc.get_table("t1").seats[0].guest_id is None
    assert doc.get_table("t2").seats[3].guest_id == "g1"

def test_swap_out_is_not_a_swap(document):
    """The incoming guest's old seat is not given to the outgoing guest"""
    doc = apply_action(document, AssignGuest(guest_id="g2", table_id="t2", seat_index=1))
    doc = apply_action(doc, AssignGuest(guest_id="g2", table_id="t1", seat_index=0))

    assert doc.get_guest("g1").seat is None
    assert doc.get_guest("g2").seat == ("t1", 0)
    assert doc.get_table("t2").seats[1].guest_id is None

def test_assign_invalid_references_are_noops(document):
    for action in (
        AssignGuest(guest_id="missing", table_id="t1", seat_index=0),
        AssignGuest(guest_id="g2", table_id="missing", seat_index=0),
        AssignGuest(guest_id="g2", table_id="t2", seat_index=4),
        AssignGuest(guest_id="g1", table_id="t1", seat_index=0),
    ):
        assert apply_action(document, action) is document

def test_unassign_clears_only_seat(document):
    doc = apply_action(document, UnassignGuest(guest_id="g1"))

    g1 = doc.get_guest("g1")
    assert g1.seat is None
    assert g1.name == "G1"
    assert doc.get_table("t1").seats[0].guest_id is None
    assert apply_action(doc, UnassignGuest(guest_id="g1")) is doc

def test_delete_table_cascades_to_guests(document):
    doc = apply_action(document, DeleteTable(id="t1"))

    assert doc.get_table("t1") is None
    g1 = doc.get_guest("g1")
    assert g1 is not None
    assert g1.table_id is None
    assert g1.seat_index is None
    assert apply_action(doc, DeleteTable(id="t1")) is doc

def test_update_table_fields(document):
    doc = apply_action(document, UpdateTable(id="t1", updates=TableUpdate(x=120, y=240, name="Head")))

    table = doc.get_table("t1")
    assert (table.x, table.y, table.name) == (120, 240, "Head")
    assert table.capacity == 8
    assert document.get_table("t1").x == 0

def test_update_table_noops(document):
    assert apply_action(document, UpdateTable(id="missing", updates=TableUpdate(x=1))) is document
    assert apply_action(document, UpdateTable(id="t1", updates=TableUpdate(x=0))) is document
    assert apply_action(document, UpdateTable(id="t1", updates=TableUpdate())) is document

def test_shrinking_table_unseats_guests_in_removed_seats(document):
    doc = apply_action(document, AssignGuest(guest_id="g2", table_id="t1", seat_index=6))
    doc = apply_action(doc, UpdateTable(id="t1", updates=TableUpdate(seat_count=4)))

    assert doc.get_table("t1").capacity == 4
    assert doc.get_guest("g2").seat is None
    assert doc.get_guest("g1").seat == ("t1", 0)

def test_growing_table_adds_empty_seats(document):
    doc = apply_action(document, UpdateTable(id="t2", updates=TableUpdate(seat_count=10)))

    assert doc.get_table("t2").capacity == 10
    assert all(seat.guest_id is None for seat in doc.get_table("t2").seats)

def test_add_table_and_duplicate_id(document):
    doc = apply_action(document, AddTable(table=make_table("t3")))
    assert [t.id for t in doc.tables] == ["t1", "t2", "t3"]
    assert apply_action(doc, AddTable(table=make_table("t3"))) is doc

def test_add_guest_with_taken_seat_is_added_unassigned(document):
    incoming = make_guest("g4", table_id="t1", seat_index=0)
    doc = apply_action(document, AddGuest(guest=incoming))

    assert doc.get_guest("g4").seat is None
    assert doc.get_guest("g1").seat == ("t1", 0)

def test_add_guest_with_free_seat_keeps_it(document):
    doc = apply_action(document, AddGuest(guest=make_guest("g4", table_id="t2", seat_index=2)))

    assert doc.get_guest("g4").seat == ("t2", 2)
    assert doc.get_table("t2").seats[2].guest_id == "g4"

def test_update_guest_fields(document):
    updates = GuestUpdate(name="Gina", group="Smith", meal="Vegan", dietary=["Nut Allergy"])
    doc = apply_action(document, UpdateGuest(id="g2", updates=updates))

    guest = doc.get_guest("g2")
    assert (guest.name, guest.group, guest.meal, guest.dietary) == ("Gina", "Smith", "Vegan", ["Nut Allergy"])
    assert apply_action(document, UpdateGuest(id="missing", updates=updates)) is document

def test_delete_guest_frees_seat(document):
    doc = apply_action(document, DeleteGuest(id="g1"))

    assert doc.get_guest("g1") is None
    assert doc.get_table("t1").seats[0].guest_id is None

def test_object_lifecycle(document):
    obj = VenueObject(id="o2", type="bar", label="Bar", x=10, y=20, width=120, height=40)
    doc = apply_action(document, AddObject(venue_object=obj))
    assert doc.get_object("o2") == obj
    assert apply_action(doc, AddObject(venue_object=obj)) is doc

    doc = apply_action(doc, UpdateObject(id="o2", updates=ObjectUpdate(padding=Padding(top=30))))
    assert doc.get_object("o2").padding == Padding(top=30)
    assert doc.get_object("o2").label == "Bar"

    doc = apply_action(doc, DeleteObject(id="o2"))
    assert doc.get_object("o2") is None
    assert apply_action(doc, DeleteObject(id="o2")) is doc

def test_set_zoom_is_clamped(document):
    assert apply_action(document, SetZoom(value=5)).zoom == 2.0
    assert apply_action(document, SetZoom(value=0.1)).zoom == 0.5
    assert apply_action(document, SetZoom(value=1)) is document

def test_set_floor_size(document):
    doc = apply_action(document, SetFloorSize(width=1500, height=900))
    assert (doc.floor_size.width, doc.floor_size.height) == (1500, 900)
    assert apply_action(doc, SetFloorSize(width=1500, height=900)) is doc

def test_set_document_resyncs_seat_cache(document):
    stale = SeatingDocument(
        tables=[make_table("t9", seats=2)],
        guests=[make_guest("a", table_id="t9", seat_index=1)],
    )
    doc = apply_action(document, SetDocument(document=stale))

    assert [t.id for t in doc.tables] == ["t9"]
    assert doc.get_table("t9").seats[1].guest_id == "a"
    assert apply_action(doc, SetDocument(document=doc)) is doc

def test_unknown_action_type_is_noop(document):
    class Bogus:
        type = "EXPLODE"

    assert apply_action(document, Bogus()) is document
    assert apply_action(document, object()) is document

def test_input_document_is_never_mutated(document):
    before = document.to_json()
    apply_action(document, AssignGuest(guest_id="g2", table_id="t1", seat_index=0))
    apply_action(document, DeleteTable(id="t1"))
    apply_action(document, UpdateTable(id="t1", updates=TableUpdate(seat_count=1)))
    assert document.to_json() == before

def test_seat_invariants_hold_over_action_sequence(document):
    actions = [
        AssignGuest(guest_id="g2", table_id="t1", seat_index=1),
        AssignGuest(guest_id="g3", table_id="t1", seat_index=1),
        AssignGuest(guest_id="g2", table_id="t2", seat_index=0),
        AssignGuest(guest_id="g1", table_id="t2", seat_index=0),
        UpdateTable(id="t1", updates=TableUpdate(seat_count=1)),
        AssignGuest(guest_id="g3", table_id="t1", seat_index=0),
        DeleteTable(id="t2"),
    ]
    doc = document
    for action in actions:
        doc = apply_action(doc, action)
        seats = seats_of(doc)
        assert len(seats) == len(set(seats))
        for guest in doc.guests:
            assert (guest.table_id is None) == (guest.seat_index is None)
        for table in doc.tables:
            for i, seat in enumerate(table.seats):
                occupant = next((g.id for g in doc.guests if g.seat == (table.id, i)), None)
                assert seat.guest_id == occupant

def test_parse_actions_from_json():
    actions = parse_actions([
        {"type": "ASSIGN_GUEST", "guestId": "g1", "tableId": "t1", "seatIndex": 2},
        {"type": "UPDATE_TABLE", "id": "t1", "updates": {"x": 10, "seatCount": 6}},
        {"type": "SET_ZOOM", "value": 1.5},
    ])

    assert isinstance(actions[0], AssignGuest)
    assert actions[0].seat_index == 2
    assert actions[1].updates.seat_count == 6
    assert actions[2].value == 1.5

def test_guest_rejects_half_assigned_seat():
    with pytest.raises(ValueError):
        Guest(id="g", name="G", table_id="t1")

def test_document_rejects_shared_seat():
    with pytest.raises(ValueError):
        SeatingDocument(
            tables=[make_table("t1")],
            guests=[make_guest("a", table_id="t1", seat_index=0), make_guest("b", table_id="t1", seat_index=0)],
        )

def test_document_json_round_trip(document):
    data = document.to_json()

    assert data["guests"][1]["tableId"] is None
    assert data["guests"][1]["seatIndex"] is None
    assert data["floorSize"] == {"width": 1200, "height": 800}
    assert SeatingDocument.from_json(data) == document
