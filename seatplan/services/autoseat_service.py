"""
Group-aware automatic seat assignment
"""

import logging
from typing import Dict, List

from seatplan.schemas.actions import AssignGuest
from seatplan.schemas.document import Guest, SeatingDocument

logger = logging.getLogger(__name__)

class AutoSeatService:
    """Seat unassigned guests, keeping each party at one table when possible"""

    @staticmethod
    def group_unassigned(document: SeatingDocument) -> List[List[Guest]]:
        """Unassigned guests by party, largest party first.

        Guests without a group are each their own party. Parties of equal size
        keep the order in which they first appear.
        """
        groups: Dict[str, List[Guest]] = {}
        for guest in document.unassigned_guests():
            key = f"group:{guest.group}" if guest.group else f"solo:{guest.id}"
            groups.setdefault(key, []).append(guest)
        return sorted(groups.values(), key=len, reverse=True)

    @staticmethod
    def available_seats(document: SeatingDocument) -> List[tuple]:
        """(table id, free seat indexes) per table in table order"""
        taken = {g.seat for g in document.guests if g.seat is not None}
        return [
            (table.id, [i for i in range(table.capacity) if (table.id, i) not in taken])
            for table in document.tables
        ]

    @staticmethod
    def auto_seat_actions(document: SeatingDocument) -> List[AssignGuest]:
        """One AssignGuest per placed guest; guests that do not fit stay unassigned"""
        groups = AutoSeatService.group_unassigned(document)
        if not groups or not document.tables:
            return []

        availability = AutoSeatService.available_seats(document)
        actions: List[AssignGuest] = []

        def place(guest: Guest, table_id: str, free: List[int]) -> None:
            actions.append(AssignGuest(guest_id=guest.id, table_id=table_id, seat_index=free.pop(0)))

        for party in groups:
            fitting = [entry for entry in availability if len(entry[1]) >= len(party)]
            if fitting:
                # Tightest fit keeps larger blocks open; ties keep table order
                table_id, free = min(fitting, key=lambda entry: len(entry[1]))
                for guest in party:
                    place(guest, table_id, free)
                continue

            # No single table has room: fill tables in order
            remaining = list(party)
            for table_id, free in availability:
                while free and remaining:
                    place(remaining.pop(0), table_id, free)
                if not remaining:
                    break

            if remaining:
                logger.info("No free seats left for %d guest(s)", len(remaining))

        return actions
