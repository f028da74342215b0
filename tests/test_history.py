"""
Tests for undo/redo history
"""

import pytest

from seatplan.schemas.actions import AddGuest, AssignGuest, SetFloorSize, SetZoom, TableUpdate, UpdateTable
from seatplan.schemas.document import Guest, Seat, SeatingDocument, Table
from seatplan.services.history import HistoryManager
from seatplan.services.reducer import apply_action

@pytest.fixture
def history():
    document = SeatingDocument(
        tables=[Table(id="t1", name="T1", seats=[Seat() for _ in range(8)])],
        guests=[Guest(id="g1", name="Ann"), Guest(id="g2", name="Bob")],
    )
    return HistoryManager(document)

def move(x):
    return UpdateTable(id="t1", updates=TableUpdate(x=x))

def test_starts_without_history(history):
    assert not history.can_undo
    assert not history.can_redo
    assert history.undo() is False
    assert history.redo() is False

def test_undo_redo_round_trip(history):
    start = history.present
    action = AssignGuest(guest_id="g1", table_id="t1", seat_index=0)
    history.dispatch(action)
    after = history.present

    assert history.undo()
    assert history.present is start
    assert history.can_redo

    assert history.redo()
    assert history.present is after
    assert history.present == apply_action(start, action)

def test_noop_does_not_touch_history(history):
    assert history.dispatch(move(0)) is False
    assert not history.can_undo

def test_new_action_clears_future(history):
    history.dispatch(move(10))
    history.undo()
    assert history.can_redo

    history.dispatch(move(20))
    assert not history.can_redo
    assert history.present.get_table("t1").x == 20

def test_zoom_and_floor_size_are_not_undoable(history):
    history.dispatch(move(10))
    before = history.present

    assert history.dispatch(SetZoom(value=1.5))
    assert history.dispatch(SetFloorSize(width=900, height=600))
    assert len(history.past) == 1

    history.dispatch(move(20))
    history.undo()
    # Undo skips straight back to the document before the last undoable edit
    assert history.present.get_table("t1").x == 10
    assert history.present.zoom == 1.5
    history.undo()
    assert history.present.get_table("t1").x == 0
    assert before.get_table("t1").x == 10

def test_non_undoable_does_not_clear_future(history):
    history.dispatch(move(10))
    history.undo()
    history.dispatch(SetZoom(value=2))
    assert history.can_redo

def test_history_is_bounded(history):
    for i in range(1, 61):
        history.dispatch(move(i))

    assert len(history.past) == 50
    undone = 0
    while history.undo():
        undone += 1

    assert undone == 50
    # 60 edits, 50 kept: the oldest reachable state is after the 10th edit
    assert history.present.get_table("t1").x == 10

def test_custom_limit():
    manager = HistoryManager(SeatingDocument(), limit=2)
    for i in range(5):
        manager.dispatch(AddGuest(guest=Guest(id=f"g{i}", name=f"Guest {i}")))
    assert len(manager.past) == 2

def test_reset_clears_stacks(history):
    history.dispatch(move(10))
    history.undo()
    fresh = SeatingDocument()
    history.reset(fresh)

    assert history.present is fresh
    assert not history.can_undo
    assert not history.can_redo
