"""
Spreadsheet import results
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from seatplan.core.constants import DEFAULT_MEAL
from seatplan.schemas.document import SeatingDocument

class ImportedGuest(BaseModel):
    """Guest row from a guest-list workbook; always added unassigned"""
    name: str = Field(min_length=1)
    group: str = ""
    meal: str = DEFAULT_MEAL
    dietary: List[str] = []

class ImportResult(BaseModel):
    """Either a whole seating chart or a list of guests to merge"""
    kind: Literal["full", "guests"]
    document: Optional[SeatingDocument] = None
    guests: List[ImportedGuest] = []
