"""
Tests for debounced auto-save
"""

import threading
import time

from seatplan.schemas.document import FloorSize, SeatingDocument
from seatplan.services.autosave import AutoSaver

def make_doc(width):
    return SeatingDocument(floor_size=FloorSize(width=width, height=800))

class Recorder:
    def __init__(self, fail=False):
        self.saved = []
        self.fail = fail
        self.done = threading.Event()

    def __call__(self, document):
        self.saved.append(document)
        self.done.set()
        if self.fail:
            raise RuntimeError("disk full")

def test_burst_saves_only_last_document():
    recorder = Recorder()
    saver = AutoSaver(recorder, delay=0.05)

    for width in (1000, 1100, 1200):
        saver.schedule(make_doc(width))

    assert recorder.done.wait(2)
    time.sleep(0.1)
    assert [d.floor_size.width for d in recorder.saved] == [1200]
    assert not saver.pending

def test_nothing_saved_before_quiet_period():
    recorder = Recorder()
    saver = AutoSaver(recorder, delay=5)

    saver.schedule(make_doc(1000))

    assert recorder.saved == []
    assert saver.pending
    saver.cancel()

def test_flush_saves_immediately():
    recorder = Recorder()
    saver = AutoSaver(recorder, delay=5)
    saver.schedule(make_doc(1000))

    assert saver.flush() is True
    assert [d.floor_size.width for d in recorder.saved] == [1000]
    assert saver.flush() is False

def test_cancel_drops_pending_document():
    recorder = Recorder()
    saver = AutoSaver(recorder, delay=0.05)
    saver.schedule(make_doc(1000))
    saver.cancel()

    time.sleep(0.2)
    assert recorder.saved == []
    assert not saver.pending

def test_failed_save_is_reported_and_later_saves_continue():
    errors = []
    recorder = Recorder(fail=True)
    saver = AutoSaver(recorder, delay=5, on_error=errors.append)

    saver.schedule(make_doc(1000))
    saver.flush()

    assert isinstance(saver.last_error, RuntimeError)
    assert len(errors) == 1

    recorder.fail = False
    saver.schedule(make_doc(1100))
    saver.flush()

    assert saver.last_error is None
    assert [d.floor_size.width for d in recorder.saved] == [1000, 1100]
