"""
Arrangement and auto-seat request/response schemas
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from seatplan.core.constants import PIXELS_PER_FOOT

class ArrangeOptions(BaseModel):
    """Options for automatic table layout (distances in pixels)"""
    layout: Literal["grid", "staggered"] = "grid"
    spacing: float = Field(default=13 * PIXELS_PER_FOOT, gt=0)
    object_clearance: float = Field(default=2 * PIXELS_PER_FOOT, alias="objectClearance", ge=0)
    # 0 means ceil(sqrt(table count))
    max_columns_per_row: int = Field(default=0, alias="maxColumnsPerRow", ge=0)

    class Config:
        populate_by_name = True

class Position(BaseModel):
    x: float
    y: float

class ResizeProposal(BaseModel):
    """Suggested floor size when the arranged tables fit badly"""
    too_small: bool
    width: float
    height: float
    width_ft: int
    height_ft: int
    current_width_ft: int
    current_height_ft: int
    message: str

class ArrangementPlan(BaseModel):
    """Positions at the current floor size plus an optional resize proposal"""
    positions: List[Position] = []
    proposal: Optional[ResizeProposal] = None

class ArrangeRequest(ArrangeOptions):
    """Arrange request body; accept_resize answers the resize proposal up front"""
    accept_resize: bool = Field(default=False, alias="acceptResize")
