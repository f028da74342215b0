"""
Tests for the seating session
"""

import threading

import pytest

from seatplan.core.constants import TABLE_COLORS
from seatplan.schemas.arrangement import ArrangeOptions
from seatplan.schemas.document import SeatingDocument
from seatplan.services.seating_service import SeatingSession, new_id

@pytest.fixture
def session():
    return SeatingSession()

def test_new_id_prefix():
    first = new_id("table")
    assert first.startswith("table-")
    assert first != new_id("table")

def test_add_table_cascades_positions_and_colors(session):
    tables = [session.add_table() for _ in range(5)]

    assert [(t.x, t.y) for t in tables] == [(100, 100), (250, 100), (400, 100), (550, 100), (100, 250)]
    assert tables[0].color == TABLE_COLORS[0]
    assert tables[0].name == "Table 1"
    assert tables[0].capacity == 8
    assert len(session.document.tables) == 5

def test_add_object_uses_type_defaults(session):
    stage = session.add_object("stage")
    custom = session.add_object(label="Cake", width=40, height=40, x=10, y=20)

    assert stage.label == "Stage"
    assert stage.width > 0 and stage.height > 0
    assert (stage.x, stage.y) == (100, 100)
    assert (custom.label, custom.x, custom.y) == ("Cake", 10, 20)

def test_session_undo_redo(session):
    table = session.add_table(seat_count=4)
    guest = session.add_guest("Ann", group="Smith")
    session.assign_guest(guest.id, table.id, 2)

    assert session.get_guest(guest.id).seat == (table.id, 2)
    assert session.undo()
    assert session.get_guest(guest.id).seat is None
    assert session.redo()
    assert session.get_guest(guest.id).seat == (table.id, 2)

def test_noop_edits_return_false(session):
    assert session.delete_table("missing") is False
    assert session.unassign_guest("missing") is False
    assert not session.can_undo

def test_update_helpers(session):
    table = session.add_table()
    guest = session.add_guest("Ann")
    obj = session.add_object("bar")

    assert session.update_table(table.id, name="Head", seat_count=10)
    assert session.update_guest(guest.id, meal="Vegan")
    assert session.update_object(obj.id, label="Wine Bar")

    assert session.get_table(table.id).capacity == 10
    assert session.get_guest(guest.id).meal == "Vegan"
    assert session.document.get_object(obj.id).label == "Wine Bar"

def test_zoom_to_fit(session):
    assert session.zoom_to_fit(600, 400) == 0.5
    assert session.zoom_to_fit(10000, 10000) == 2.0
    assert session.zoom_to_fit(100, 100) == 0.5
    assert not session.can_undo

def test_seating_summary(session):
    table = session.add_table(seat_count=4, name="Family")
    ann = session.add_guest("Ann")
    bob = session.add_guest("Bob")
    session.add_guest("Cy")
    session.assign_guest(bob.id, table.id, 0)
    session.assign_guest(ann.id, table.id, 1)

    summary = session.seating_summary()

    assert summary["total_guests"] == 3
    assert summary["assigned_guests"] == 2
    assert summary["unassigned_guests"] == 1
    assert summary["total_seats"] == 4
    assert summary["tables"][0]["guests"] == ["Bob", "Ann"]
    assert summary["tables"][0]["available_seats"] == 2

def test_arrange_tables_moves_every_table(session):
    for _ in range(4):
        session.add_table()

    moved = session.arrange_tables(ArrangeOptions(spacing=195))

    assert moved == 4
    assert [(t.x, t.y) for t in session.document.tables] == [
        (502.5, 80), (697.5, 80), (502.5, 275), (697.5, 275),
    ]
    # Each move is its own undo step
    session.undo()
    assert (session.document.tables[3].x, session.document.tables[3].y) == (550, 100)
    assert session.document.tables[2].y == 275

def test_arrange_with_accepted_resize_changes_floor(session):
    session.set_floor_size(300, 300)
    for _ in range(4):
        session.add_table()

    session.arrange_tables(ArrangeOptions(spacing=195), confirm_resize=True)

    assert session.document.floor_size.width == 495

def test_auto_seat_places_parties(session):
    session.add_table(seat_count=8)
    for name in ("Ann", "Bob", "Cy"):
        session.add_guest(name, group="Smith")
    session.add_guest("Solo")

    assert session.auto_seat() == 4
    assert session.unassigned_guests() == []
    assert session.auto_seat() == 0

def test_changes_are_autosaved():
    saved = []
    done = threading.Event()

    def save(document):
        saved.append(document)
        done.set()

    session = SeatingSession(on_save=save, autosave_delay=0.2)
    session.add_table()
    session.add_guest("Ann")

    assert done.wait(2)
    assert len(saved) == 1
    assert len(saved[0].guests) == 1
    assert session.flush() is False

def test_close_flushes_pending_save():
    saved = []
    session = SeatingSession(on_save=saved.append, autosave_delay=5)
    session.add_table()
    session.close()

    assert len(saved) == 1
    assert saved[0] is session.document

def test_sessions_are_independent():
    first = SeatingSession()
    second = SeatingSession(SeatingDocument())

    first.add_table()

    assert len(first.document.tables) == 1
    assert second.document.tables == []
    assert not second.can_undo
