"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

The seating chart is always read and written as one whole document; there is
no partial persistence of tables or guests.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from google.api_core.exceptions import GoogleAPIError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seatplan.core.config import settings
from seatplan.core.db import SessionLocal
from seatplan.models import Event
from seatplan.schemas.document import SeatingDocument, empty_document
from seatplan.services.firebase_client import get_firestore_client

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Loading or saving a seating document failed"""


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get_by_id_sql(db: Session, event_id: int) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def get_by_public_code_sql(db: Session, public_code: str) -> Optional[Event]:
        return db.query(Event).filter(Event.public_code == public_code).first()

    @staticmethod
    def create_sql(
        db: Session,
        title: str,
        public_code: str,
        description: Optional[str] = None,
        event_date: Optional[date] = None,
        location: Optional[str] = None,
    ) -> Event:
        event = Event(
            title=title,
            description=description,
            event_date=event_date,
            location=location,
            public_code=public_code,
            seating_data=empty_document().to_json(),
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    # Firestore shape: collection "events/{event_id}" document with fields
    @staticmethod
    def get_fs(event_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        if not fs:
            return None
        doc = fs.collection("events").document(str(event_id)).get()
        return doc.to_dict() if doc.exists else None


# -------- Seating document gateways --------

class SqlDocumentGateway:
    """Seating documents stored in the ``events.seating_data`` JSON column"""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def load(self, event_id: int) -> Optional[SeatingDocument]:
        with self.session_factory() as db:
            event = EventRepo.get_by_id_sql(db, event_id)
            if not event:
                return None
            return SeatingDocument.from_json(event.seating_data or {})

    def save(self, event_id: int, document: SeatingDocument) -> None:
        with self.session_factory() as db:
            try:
                event = EventRepo.get_by_id_sql(db, event_id)
                if not event:
                    raise PersistenceError(f"Event {event_id} not found")
                event.seating_data = document.to_json()
                event.updated_at = datetime.utcnow()
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Could not save seating for event {event_id}: {e}") from e
        logger.info(f"Saved seating for event {event_id}")


class FirestoreDocumentGateway:
    """Seating documents stored on the Firestore event document"""

    def load(self, event_id: str) -> Optional[SeatingDocument]:
        data = EventRepo.get_fs(event_id)
        if data is None:
            return None
        return SeatingDocument.from_json(data.get("seating_data") or {})

    def save(self, event_id: str, document: SeatingDocument) -> None:
        fs = get_firestore_client()
        try:
            fs.collection("events").document(str(event_id)).set({
                "seating_data": document.to_json(),
                "updated_at": datetime.utcnow().isoformat(),
            }, merge=True)
        except GoogleAPIError as e:
            raise PersistenceError(f"Could not save seating for event {event_id}: {e}") from e
        logger.info(f"Saved seating for event {event_id}")


def get_document_gateway():
    """Gateway for the configured storage backend"""
    if use_firestore():
        return FirestoreDocumentGateway()
    return SqlDocumentGateway()
