"""
Export of the stored calendar to JSON and Excel files.

Exports always contain every stored date. The filename carries the year
and month that were on screen when the export was requested.
"""

import json
import logging
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from core.config import EXPORT_FILENAME_PREFIX, EXPORT_HEADERS, OUTPUT_DIR
from core.exceptions import ExportError
from services.event_store import EventStore

logger = logging.getLogger(__name__)

EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_filename(year: int, month: int, ext: str = "json") -> str:
    """Example: calendar-events-2026-10.json"""
    return f"{EXPORT_FILENAME_PREFIX}-{year:04d}-{month:02d}.{ext}"


def render_export_json(store: EventStore) -> str:
    """Pretty-printed JSON of the entire mapping."""
    return json.dumps(store.to_dict(), indent=2, ensure_ascii=False)


def write_export_json(store: EventStore, year: int, month: int, output_dir: Path | None = None) -> Path:
    """Write the JSON export and return its path."""
    output_path = Path(output_dir or OUTPUT_DIR) / export_filename(year, month, "json")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render_export_json(store), encoding="utf-8")
    except OSError as e:
        logger.error(f"Error exporting events: {e}")
        raise ExportError(f"Failed to export events: {e}") from e
    logger.info(f"Exported {len(store)} events to {output_path}")
    return output_path


# =============================================================================
# EXCEL EXPORT
# =============================================================================


def write_excel_events_sheet(ws, store: EventStore):
    """
    Write one row per event, ordered by date then start time.

    Headers: Date, Start, End, Name, Description, Color
    """
    for col_idx, header in enumerate(EXPORT_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    row_idx = 2
    for date_key in sorted(store.dates()):
        for event in store.query(date_key):
            row_data = [
                date_key,
                event.start_time,
                event.end_time,
                event.name,
                event.description,
                event.color,
            ]
            for col_idx, value in enumerate(row_data, start=1):
                ws.cell(row=row_idx, column=col_idx, value=value)
            row_idx += 1

    # Widen the free-text columns
    for col_idx, width in ((4, 30), (5, 50)):
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def build_export_workbook(store: EventStore) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = "Events"
    write_excel_events_sheet(ws, store)
    return wb


def render_export_excel(store: EventStore) -> bytes:
    """Excel workbook bytes for download."""
    buffer = BytesIO()
    try:
        build_export_workbook(store).save(buffer)
    except IllegalCharacterError as e:
        # openpyxl rejects control characters in cell values
        logger.error(f"Error exporting events: {e}")
        raise ExportError(f"Failed to export events: {e}") from e
    return buffer.getvalue()


def write_export_excel(store: EventStore, year: int, month: int, output_dir: Path | None = None) -> Path:
    """Write the Excel export and return its path."""
    output_path = Path(output_dir or OUTPUT_DIR) / export_filename(year, month, "xlsx")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        build_export_workbook(store).save(str(output_path))
    except (OSError, IllegalCharacterError) as e:
        logger.error(f"Error exporting events: {e}")
        raise ExportError(f"Failed to export events: {e}") from e
    logger.info(f"Exported {len(store)} events to {output_path}")
    return output_path
