"""
Automatic table layout around venue objects
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from seatplan.core.constants import PIXELS_PER_FOOT
from seatplan.schemas.actions import SetFloorSize, TableUpdate, UpdateTable
from seatplan.schemas.arrangement import ArrangeOptions, ArrangementPlan, Position, ResizeProposal
from seatplan.schemas.document import SeatingDocument, VenueObject

logger = logging.getLogger(__name__)

TABLE_RADIUS = 70
MARGIN = TABLE_RADIUS + 10
SCAN_LIMIT_Y = 10000
STAGGER_ROW_FACTOR = 0.866
# A floor is oversized when the layout uses less than this share of a side
MIN_FLOOR_USE = 0.6

ConfirmResize = Union[bool, Callable[[ResizeProposal], bool]]

@dataclass
class ExclusionZone:
    """Rectangle that no table square may overlap"""
    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def around(cls, obj: VenueObject, clearance: float) -> "ExclusionZone":
        pad = obj.padding
        top = max(pad.top if pad else 0, clearance)
        right = max(pad.right if pad else 0, clearance)
        bottom = max(pad.bottom if pad else 0, clearance)
        left = max(pad.left if pad else 0, clearance)
        return cls(
            left=obj.x - left,
            top=obj.y - top,
            right=obj.x + obj.width + right,
            bottom=obj.y + obj.height + bottom,
        )

    def blocks(self, x: float, y: float) -> bool:
        """True if a table centered at (x, y) would overlap the zone"""
        return (
            x + TABLE_RADIUS > self.left
            and x - TABLE_RADIUS < self.right
            and y + TABLE_RADIUS > self.top
            and y - TABLE_RADIUS < self.bottom
        )

class ArrangementService:
    """Grid/staggered table packing with floor-size negotiation"""

    @staticmethod
    def exclusion_zones(document: SeatingDocument, options: ArrangeOptions) -> List[ExclusionZone]:
        return [ExclusionZone.around(obj, options.object_clearance) for obj in document.objects]

    @staticmethod
    def _stagger(options: ArrangeOptions, row: int) -> float:
        if options.layout != "staggered":
            return 0
        return options.spacing / 4 if row % 2 == 1 else -options.spacing / 4

    @staticmethod
    def compute_positions(
        document: SeatingDocument,
        options: ArrangeOptions,
        floor_width: float,
    ) -> List[Position]:
        """One center position per table, in document order"""
        count = len(document.tables)
        if count == 0:
            return []

        zones = ArrangementService.exclusion_zones(document, options)
        spacing = options.spacing
        columns = options.max_columns_per_row or math.ceil(math.sqrt(count))
        row_height = spacing * STAGGER_ROW_FACTOR if options.layout == "staggered" else spacing
        scan_step = row_height / 2

        slots: List[List[float]] = []
        y = MARGIN
        placed_rows = 0
        last_row_y = -math.inf
        while len(slots) < count and y < SCAN_LIMIT_Y:
            if y - last_row_y < row_height - 1:
                y += scan_step
                continue

            start_x = (floor_width - (columns - 1) * spacing) / 2 + ArrangementService._stagger(options, placed_rows)
            row_slots = []
            for col in range(columns):
                x = start_x + col * spacing
                if not any(zone.blocks(x, y) for zone in zones):
                    row_slots.append([x, y])

            if row_slots:
                slots.extend(row_slots)
                placed_rows += 1
                last_row_y = y
                y += row_height
            else:
                y += scan_step

        positions = [list(slot) for slot in slots[:count]]
        if len(positions) < count:
            logger.warning(
                "Only %d of %d tables found a clear slot; placing the rest at the last slot",
                len(positions), count,
            )
            fallback = positions[-1] if positions else [floor_width / 2, MARGIN]
            positions.extend([list(fallback) for _ in range(count - len(positions))])

        # Re-center every row on the tables that actually landed in it
        rows: Dict[int, List[int]] = {}
        for i, (_, py) in enumerate(positions):
            rows.setdefault(round(py), []).append(i)

        def blocked(xs, y):
            return sum(1 for x in xs if any(zone.blocks(x, y) for zone in zones))

        for row_index, (_, indices) in enumerate(sorted(rows.items())):
            start_x = (floor_width - (len(indices) - 1) * spacing) / 2 + ArrangementService._stagger(options, row_index)
            indices.sort(key=lambda i: positions[i][0])
            row_y = positions[indices[0]][1]
            centered = [start_x + col * spacing for col in range(len(indices))]
            # A row keeps its scanned slots when centering would move tables into a zone
            if blocked(centered, row_y) > blocked([positions[i][0] for i in indices], row_y):
                continue
            for i, x in zip(indices, centered):
                positions[i][0] = x

        return [Position(x=px, y=py) for px, py in positions]

    @staticmethod
    def propose_floor_size(
        document: SeatingDocument,
        positions: List[Position],
    ) -> Optional[ResizeProposal]:
        """Resize proposal when the layout overflows or badly underfills the floor"""
        if not positions:
            return None

        floor_w = document.floor_size.width
        floor_h = document.floor_size.height
        min_x = min(p.x for p in positions) - TABLE_RADIUS
        max_x = max(p.x for p in positions) + TABLE_RADIUS
        max_y = max(p.y for p in positions) + TABLE_RADIUS
        needed_w = max_x + MARGIN
        needed_h = max_y + MARGIN

        too_small = needed_w > floor_w or needed_h > floor_h or min_x < 0
        too_large = needed_w < floor_w * MIN_FLOOR_USE or needed_h < floor_h * MIN_FLOOR_USE
        if not (too_small or too_large):
            return None

        suggest_w = max(needed_w, needed_w - min_x + MARGIN) if min_x < 0 else needed_w
        suggest_h = needed_h
        width_ft = math.ceil(suggest_w / PIXELS_PER_FOOT)
        height_ft = math.ceil(suggest_h / PIXELS_PER_FOOT)
        current_w_ft = round(floor_w / PIXELS_PER_FOOT)
        current_h_ft = round(floor_h / PIXELS_PER_FOOT)
        count = len(positions)

        if too_small:
            message = (
                f"Tables don't fit in the current floor ({current_w_ft}x{current_h_ft} ft). "
                f"Resize to {width_ft}x{height_ft} ft to fit all {count} tables?"
            )
        else:
            message = (
                f"The floor ({current_w_ft}x{current_h_ft} ft) is larger than needed. "
                f"Resize to {width_ft}x{height_ft} ft to better fit {count} tables?"
            )

        return ResizeProposal(
            too_small=too_small,
            width=suggest_w,
            height=suggest_h,
            width_ft=width_ft,
            height_ft=height_ft,
            current_width_ft=current_w_ft,
            current_height_ft=current_h_ft,
            message=message,
        )

    @staticmethod
    def plan(document: SeatingDocument, options: ArrangeOptions) -> ArrangementPlan:
        """Positions at the current floor width plus an optional resize proposal"""
        positions = ArrangementService.compute_positions(document, options, document.floor_size.width)
        return ArrangementPlan(
            positions=positions,
            proposal=ArrangementService.propose_floor_size(document, positions),
        )

    @staticmethod
    def arrangement_actions(
        document: SeatingDocument,
        options: ArrangeOptions,
        confirm_resize: ConfirmResize = False,
    ) -> list:
        """Actions that move every table to its arranged position.

        When a resize is proposed and ``confirm_resize`` accepts it (a bool or a
        callable receiving the proposal), a ``SetFloorSize`` comes first and the
        positions are recomputed at the new floor width. A declined resize still
        positions every table on the current floor.
        """
        plan = ArrangementService.plan(document, options)
        if not plan.positions:
            return []

        actions = []
        positions = plan.positions
        proposal = plan.proposal
        if proposal is not None:
            accepted = confirm_resize(proposal) if callable(confirm_resize) else bool(confirm_resize)
            logger.info("Floor resize proposed (%s): %s", "accepted" if accepted else "declined", proposal.message)
            if accepted:
                actions.append(SetFloorSize(width=proposal.width, height=proposal.height))
                positions = ArrangementService.compute_positions(document, options, proposal.width)

        for table, position in zip(document.tables, positions):
            actions.append(UpdateTable(id=table.id, updates=TableUpdate(x=position.x, y=position.y)))
        return actions
