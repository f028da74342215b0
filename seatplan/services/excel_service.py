"""
Excel import/export of seating charts

Workbooks measure positions in feet; the seating document uses pixels.
The conversion happens here and nowhere else.
"""

import io
import logging
import math
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd
from pydantic import ValidationError

from seatplan.core.constants import DEFAULT_MEAL, PIXELS_PER_FOOT, TABLE_COLORS, VENUE_OBJECT_TYPES
from seatplan.schemas.document import FloorSize, Guest, Padding, Seat, SeatingDocument, Table, VenueObject
from seatplan.schemas.transfer import ImportedGuest, ImportResult

logger = logging.getLogger(__name__)

GUEST_COLUMNS = ['Name', 'Group', 'Meal', 'Dietary Restrictions', 'Table', 'Table ID', 'Seat']
TABLE_COLUMNS = ['Table ID', 'Table', 'Capacity', 'Assigned', 'Available', 'Guests', 'X (ft)', 'Y (ft)', 'Color']
OBJECT_COLUMNS = [
    'Type', 'Label', 'X (ft)', 'Y (ft)', 'Width (ft)', 'Height (ft)', 'Color',
    'Padding Top (ft)', 'Padding Right (ft)', 'Padding Bottom (ft)', 'Padding Left (ft)',
]

# Accepted headers for guest-list imports, matched case-insensitively
GUEST_ALIASES = {
    'name': ['name', 'guest name'],
    'group': ['group', 'party'],
    'meal': ['meal', 'meal preference'],
    'dietary': ['dietary', 'dietary restrictions'],
}

REQUIRED_TABLE_COLUMNS = ['Table ID', 'Table', 'Capacity', 'X (ft)', 'Y (ft)']
REQUIRED_GUEST_COLUMNS = ['Name']

def _text(value: Any) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ''
    text = str(value).strip()
    return '' if text.lower() == 'nan' else text

def _number(value: Any) -> Optional[float]:
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number

def _to_px(value: Any, default: float = 0) -> float:
    feet = _number(value)
    return default if feet is None else feet * PIXELS_PER_FOOT

def _to_ft(value: float) -> float:
    return round(value / PIXELS_PER_FOOT, 2)

def _split_dietary(value: Any) -> List[str]:
    return [part.strip() for part in _text(value).split(',') if part.strip()]

def _find_column(df: pd.DataFrame, aliases: List[str]) -> Optional[str]:
    for col in df.columns:
        if str(col).lower().strip() in aliases:
            return col
    return None

class ExcelService:
    """Service for handling Excel operations"""

    # -------- Import --------

    @staticmethod
    def validate_excel_structure(df: pd.DataFrame, required: List[str], sheet: str) -> Tuple[bool, List[str]]:
        """Check that a sheet has the required columns"""
        normalized = [str(col).lower().strip() for col in df.columns]
        missing = [col for col in required if col.lower() not in normalized]
        if missing:
            return False, [f"Sheet '{sheet}' is missing required columns: {', '.join(missing)}"]
        return True, []

    @staticmethod
    def parse_guest_list(df: pd.DataFrame) -> Tuple[bool, List[str], List[ImportedGuest]]:
        """Guest rows from a plain guest list; rows without a name are skipped"""
        columns = {key: _find_column(df, aliases) for key, aliases in GUEST_ALIASES.items()}
        if columns['name'] is None:
            return False, ["Missing required column: Name"], []

        guests = []
        for _, row in df.iterrows():
            name = _text(row[columns['name']])
            if not name:
                continue
            guests.append(ImportedGuest(
                name=name,
                group=_text(row[columns['group']]) if columns['group'] else '',
                meal=(_text(row[columns['meal']]) if columns['meal'] else '') or DEFAULT_MEAL,
                dietary=_split_dietary(row[columns['dietary']]) if columns['dietary'] else [],
            ))
        return True, [], guests

    @staticmethod
    def parse_full_workbook(sheets: Dict[str, pd.DataFrame]) -> Tuple[bool, List[str], Optional[SeatingDocument]]:
        """Rebuild a whole seating chart from an exported workbook"""
        errors: List[str] = []
        tables_df = sheets['Tables']
        guests_df = sheets['Guests']
        for df, required, name in (
            (tables_df, REQUIRED_TABLE_COLUMNS, 'Tables'),
            (guests_df, REQUIRED_GUEST_COLUMNS, 'Guests'),
        ):
            _, structure_errors = ExcelService.validate_excel_structure(df, required, name)
            errors.extend(structure_errors)
        if errors:
            return False, errors, None

        tables: List[Table] = []
        for _, row in tables_df.iterrows():
            number = _number(row['Table ID'])
            capacity = _number(row['Capacity'])
            if number is None or capacity is None or capacity < 0:
                errors.append(f"Table '{_text(row['Table'])}' needs a numeric Table ID and Capacity")
                continue
            if any(t.id == f"table-{int(number)}" for t in tables):
                errors.append(f"Table ID {int(number)} is used by more than one table")
                continue
            color = _text(row['Color']) if 'Color' in tables_df.columns else ''
            tables.append(Table(
                id=f"table-{int(number)}",
                name=_text(row['Table']) or f"Table {int(number)}",
                x=_to_px(row['X (ft)']),
                y=_to_px(row['Y (ft)']),
                seats=[Seat() for _ in range(int(capacity))],
                color=color or TABLE_COLORS[len(tables) % len(TABLE_COLORS)],
            ))
        capacities = {t.id: t.capacity for t in tables}

        guests: List[Guest] = []
        for i, row in enumerate(guests_df.itertuples(index=False)):
            row = dict(zip(guests_df.columns, row))
            name = _text(row.get('Name'))
            if not name:
                continue
            table_id = None
            seat_index = None
            number = _number(row.get('Table ID'))
            seat = _number(row.get('Seat'))
            if number is not None and seat is not None:
                table_id = f"table-{int(number)}"
                seat_index = int(seat) - 1
                if table_id not in capacities:
                    errors.append(f"Guest '{name}' refers to unknown table {int(number)}")
                    continue
                if not 0 <= seat_index < capacities[table_id]:
                    errors.append(f"Guest '{name}' has seat {int(seat)} outside table {int(number)}")
                    continue
            guests.append(Guest(
                id=f"guest-{i + 1}",
                name=name,
                group=_text(row.get('Group')),
                meal=_text(row.get('Meal')) or DEFAULT_MEAL,
                dietary=_split_dietary(row.get('Dietary Restrictions')),
                table_id=table_id,
                seat_index=seat_index,
            ))

        objects: List[VenueObject] = []
        objects_df = sheets.get('Objects')
        if objects_df is not None:
            for i, row in enumerate(objects_df.itertuples(index=False)):
                row = dict(zip(objects_df.columns, row))
                object_type = _text(row.get('Type')).lower()
                if object_type not in VENUE_OBJECT_TYPES:
                    object_type = 'custom'
                padding = Padding(
                    top=_to_px(row.get('Padding Top (ft)')),
                    right=_to_px(row.get('Padding Right (ft)')),
                    bottom=_to_px(row.get('Padding Bottom (ft)')),
                    left=_to_px(row.get('Padding Left (ft)')),
                )
                objects.append(VenueObject(
                    id=f"object-{i + 1}",
                    type=object_type,
                    label=_text(row.get('Label')) or VENUE_OBJECT_TYPES[object_type][0],
                    x=_to_px(row.get('X (ft)')),
                    y=_to_px(row.get('Y (ft)')),
                    width=_to_px(row.get('Width (ft)')),
                    height=_to_px(row.get('Height (ft)')),
                    color=_text(row.get('Color')),
                    padding=padding if padding != Padding() else None,
                ))

        floor = FloorSize()
        summary_df = sheets.get('Summary')
        if summary_df is not None and {'Metric', 'Value'} <= set(summary_df.columns):
            metrics = {_text(m): v for m, v in zip(summary_df['Metric'], summary_df['Value'])}
            floor = FloorSize(
                width=_to_px(metrics.get('Floor Width (ft)'), floor.width),
                height=_to_px(metrics.get('Floor Height (ft)'), floor.height),
            )

        if errors:
            return False, errors, None

        try:
            document = SeatingDocument(tables=tables, guests=guests, objects=objects, floor_size=floor)
        except ValidationError as e:
            return False, [f"Invalid seating chart: {err['msg']}" for err in e.errors()], None
        return True, [], document

    @staticmethod
    def parse_workbook(file_content: bytes) -> Tuple[bool, List[str], Optional[ImportResult]]:
        """Read an uploaded workbook as a full chart or as a guest list"""
        try:
            sheets = pd.read_excel(io.BytesIO(file_content), sheet_name=None)
        except Exception as e:
            return False, [f"Error reading Excel file: {str(e)}"], None

        if not sheets:
            return False, ["Workbook has no sheets"], None

        if 'Tables' in sheets and 'Guests' in sheets:
            ok, errors, document = ExcelService.parse_full_workbook(sheets)
            if not ok:
                return False, errors, None
            logger.info(
                f"Imported full seating chart: {len(document.guests)} guests, "
                f"{len(document.tables)} tables, {len(document.objects)} objects"
            )
            return True, [], ImportResult(kind="full", document=document)

        first_sheet = next(iter(sheets.values()))
        ok, errors, guests = ExcelService.parse_guest_list(first_sheet)
        if not ok:
            return False, errors, None
        logger.info(f"Imported {len(guests)} guests")
        return True, [], ImportResult(kind="guests", guests=guests)

    # -------- Export --------

    @staticmethod
    def create_template() -> bytes:
        """Guest-list template with sample rows"""
        df = pd.DataFrame([
            ['Sample Guest 1', 'Smith Family', 'Standard', ''],
            ['Sample Guest 2', 'Smith Family', 'Vegetarian', 'Nut Allergy'],
            ['Sample Guest 3', '', 'Kids Meal', 'Dairy-Free, Egg Allergy'],
        ], columns=['Name', 'Group', 'Meal', 'Dietary Restrictions'])

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')
        return buffer.getvalue()

    @staticmethod
    def export_document(document: SeatingDocument) -> bytes:
        """Workbook with Guests, Tables, Objects and Summary sheets"""
        numbers = {table.id: i + 1 for i, table in enumerate(document.tables)}
        names = {table.id: table.name for table in document.tables}

        guest_rows = [
            {
                'Name': guest.name,
                'Group': guest.group,
                'Meal': guest.meal,
                'Dietary Restrictions': ', '.join(guest.dietary),
                'Table': names.get(guest.table_id, 'Unassigned'),
                'Table ID': numbers.get(guest.table_id, ''),
                'Seat': guest.seat_index + 1 if guest.seat_index is not None else '',
            }
            for guest in document.guests
        ]

        table_rows = []
        for table in document.tables:
            seated = sorted(
                (g for g in document.guests if g.table_id == table.id),
                key=lambda g: g.seat_index,
            )
            table_rows.append({
                'Table ID': numbers[table.id],
                'Table': table.name,
                'Capacity': table.capacity,
                'Assigned': len(seated),
                'Available': table.capacity - len(seated),
                'Guests': ', '.join(g.name for g in seated),
                'X (ft)': _to_ft(table.x),
                'Y (ft)': _to_ft(table.y),
                'Color': table.color,
            })

        object_rows = []
        for obj in document.objects:
            pad = obj.padding or Padding()
            object_rows.append({
                'Type': obj.type,
                'Label': obj.label,
                'X (ft)': _to_ft(obj.x),
                'Y (ft)': _to_ft(obj.y),
                'Width (ft)': _to_ft(obj.width),
                'Height (ft)': _to_ft(obj.height),
                'Color': obj.color,
                'Padding Top (ft)': _to_ft(pad.top),
                'Padding Right (ft)': _to_ft(pad.right),
                'Padding Bottom (ft)': _to_ft(pad.bottom),
                'Padding Left (ft)': _to_ft(pad.left),
            })

        unassigned = len(document.unassigned_guests())
        summary_rows = [
            {'Metric': 'Total Guests', 'Value': len(document.guests)},
            {'Metric': 'Assigned Guests', 'Value': len(document.guests) - unassigned},
            {'Metric': 'Unassigned Guests', 'Value': unassigned},
            {'Metric': 'Total Tables', 'Value': len(document.tables)},
            {'Metric': 'Total Seats', 'Value': sum(t.capacity for t in document.tables)},
            {'Metric': 'Floor Width (ft)', 'Value': _to_ft(document.floor_size.width)},
            {'Metric': 'Floor Height (ft)', 'Value': _to_ft(document.floor_size.height)},
        ]

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            pd.DataFrame(guest_rows, columns=GUEST_COLUMNS).to_excel(writer, index=False, sheet_name='Guests')
            pd.DataFrame(table_rows, columns=TABLE_COLUMNS).to_excel(writer, index=False, sheet_name='Tables')
            pd.DataFrame(object_rows, columns=OBJECT_COLUMNS).to_excel(writer, index=False, sheet_name='Objects')
            pd.DataFrame(summary_rows, columns=['Metric', 'Value']).to_excel(writer, index=False, sheet_name='Summary')
        return buffer.getvalue()
