"""
Debounced auto-save of settled seating documents
"""

import logging
import threading
from typing import Callable, Optional

from seatplan.core.config import settings
from seatplan.schemas.document import SeatingDocument

logger = logging.getLogger(__name__)

class AutoSaver:
    """Trailing debounce in front of a save callable.

    Every ``schedule`` replaces the pending document and restarts the quiet
    period; only the document that is still the latest when the timer fires
    is saved. Superseded documents are dropped, never queued. A failing save
    is logged and handed to ``on_error``; it does not stop later saves.
    """

    def __init__(
        self,
        save: Callable[[SeatingDocument], None],
        delay: Optional[float] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.save = save
        self.delay = settings.AUTOSAVE_DELAY_SECONDS if delay is None else delay
        self.on_error = on_error
        self.last_error: Optional[Exception] = None
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._version = 0
        self._pending: Optional[SeatingDocument] = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self, document: SeatingDocument) -> None:
        """Make ``document`` the next one to save and restart the quiet period"""
        with self._lock:
            self._version += 1
            self._pending = document
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire, args=(self._version,))
            self._timer.daemon = True
            self._timer.start()

    def _take(self, version: Optional[int]) -> Optional[SeatingDocument]:
        with self._lock:
            if version is not None and version != self._version:
                return None
            document = self._pending
            self._pending = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            return document

    def _fire(self, version: int) -> None:
        document = self._take(version)
        if document is not None:
            self._save(document)

    def _save(self, document: SeatingDocument) -> None:
        try:
            self.save(document)
        except Exception as e:
            self.last_error = e
            logger.error(f"Auto-save failed: {e}")
            if self.on_error is not None:
                self.on_error(e)
        else:
            self.last_error = None

    def flush(self) -> bool:
        """Save the pending document now; returns False if nothing was pending"""
        document = self._take(None)
        if document is None:
            return False
        self._save(document)
        return True

    def cancel(self) -> None:
        """Drop the pending document without saving it"""
        self._take(None)
