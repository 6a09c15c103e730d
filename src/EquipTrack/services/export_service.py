"""
Export Service - plant-grouped exports of the active equipment.

CSV layout (one block per plant, plants in lexicographic order):

    <blank line>
    CD-1
    TAG,Type,Status,Comments,Created,Updated
    "P-101","Pump","Available","needs ""seal"" kit","3/1/2025","3/2/2025"
    <blank line>

Every data field is quoted and embedded quotes are doubled. Type and status
go through the caller's ``t`` lookup; dates through its date formatter.

The same grouping is available as an .xlsx workbook, one sheet per plant.
"""

import csv
import io
import os
import re
import shutil
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font

from EquipTrack.exceptions import ExportUnavailableError
from EquipTrack.logging_config import get_logger
from EquipTrack.messages import ExportMessages
from EquipTrack.models import Equipment

logger = get_logger(__name__)

EXPORT_HEADER = ["TAG", "Type", "Status", "Comments", "Created", "Updated"]

CSV_MIME_TYPE = "text/csv"
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Excel limits sheet titles to 31 characters and forbids these
INVALID_SHEET_TITLE_CHARS = re.compile(r"[\\/*?:\[\]]")
MAX_SHEET_TITLE_LENGTH = 31


# ============================================================================
# SHARE CHANNELS
# ============================================================================


class FolderShareChannel:
    """Shares an export by copying it into a target folder (e.g. a synced drive)."""

    def __init__(self, target_dir: Optional[str]):
        self.target_dir = target_dir

    def is_available(self) -> bool:
        return bool(self.target_dir)

    def share(self, file_path: str, mime_type: str, dialog_title: str = ExportMessages.DIALOG_TITLE) -> str:
        os.makedirs(self.target_dir, exist_ok=True)
        destination = os.path.join(self.target_dir, os.path.basename(file_path))
        shutil.copy2(file_path, destination)
        logger.info(f"{dialog_title}: shared {os.path.basename(file_path)} ({mime_type}) to {self.target_dir}")
        return destination


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def group_by_plant(equipment: Iterable[Equipment]) -> Dict[str, List[Equipment]]:
    """Active records grouped by plant code, plant codes sorted, input order kept per group."""
    grouped: Dict[str, List[Equipment]] = {}
    for item in equipment:
        if not item.deleted:
            grouped.setdefault(item.plant_code, []).append(item)
    return {plant: grouped[plant] for plant in sorted(grouped)}


def _row(item: Equipment, t: Callable, date_formatter: Callable[[int], str]) -> List[str]:
    return [
        item.tag,
        t(item.type.value),
        t(item.status.value),
        item.comments or "",
        date_formatter(item.created_at),
        date_formatter(item.updated_at),
    ]


def sheet_title(plant: str) -> str:
    """Plant code made safe for use as a worksheet title."""
    return INVALID_SHEET_TITLE_CHARS.sub("-", plant)[:MAX_SHEET_TITLE_LENGTH] or "Equipment"


def export_filename(today: Optional[date] = None, extension: str = "csv") -> str:
    today = today or date.today()
    return f"equipment_export_{today.isoformat()}.{extension}"


def _share(file_path: str, share_channel, mime_type: str) -> str:
    if share_channel is None or not share_channel.is_available():
        raise ExportUnavailableError(ExportMessages.SHARING_UNAVAILABLE)
    try:
        return share_channel.share(file_path, mime_type, ExportMessages.DIALOG_TITLE)
    except OSError as e:
        logger.error(f"Error sharing export {file_path}: {e}")
        raise ExportUnavailableError(f"{ExportMessages.EXPORT_ERROR}: {e}") from e


# ============================================================================
# CSV
# ============================================================================


def build_csv(
    equipment: Iterable[Equipment], t: Callable, date_formatter: Callable[[int], str]
) -> str:
    """Serialize the active records. Deterministic for a given input order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    for plant, items in group_by_plant(equipment).items():
        buffer.write(f"\n{plant}\n")
        buffer.write(",".join(EXPORT_HEADER) + "\n")
        for item in items:
            writer.writerow(_row(item, t, date_formatter))
        buffer.write("\n")

    return buffer.getvalue()


def export_to_csv(
    equipment: Iterable[Equipment],
    t: Callable,
    date_formatter: Callable[[int], str],
    export_dir: str,
    share_channel=None,
    today: Optional[date] = None,
) -> str:
    """
    Write the CSV export to ``export_dir`` and share it.

    Returns:
        Path of the written file

    Raises:
        ExportUnavailableError: File cannot be written, or no share channel
    """
    content = build_csv(equipment, t, date_formatter)
    file_path = os.path.join(export_dir, export_filename(today, "csv"))

    try:
        os.makedirs(export_dir, exist_ok=True)
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Error exporting to CSV: {e}")
        raise ExportUnavailableError(f"{ExportMessages.EXPORT_ERROR}: {e}") from e

    logger.info(f"CSV export written: {file_path}")
    _share(file_path, share_channel, CSV_MIME_TYPE)
    return file_path


# ============================================================================
# EXCEL WORKBOOK
# ============================================================================


def build_workbook(
    equipment: Iterable[Equipment], t: Callable, date_formatter: Callable[[int], str]
) -> Workbook:
    """One sheet per plant with a bold header row."""
    wb = Workbook()
    default_sheet = wb.active
    grouped = group_by_plant(equipment)

    if not grouped:
        default_sheet.title = "Equipment"
        default_sheet.append(EXPORT_HEADER)
        return wb

    wb.remove(default_sheet)
    bold = Font(bold=True)
    for plant, items in grouped.items():
        ws = wb.create_sheet(title=sheet_title(plant))
        ws.append(EXPORT_HEADER)
        for cell in ws[1]:
            cell.font = bold
        for item in items:
            ws.append(_row(item, t, date_formatter))

    return wb


def export_to_workbook(
    equipment: Iterable[Equipment],
    t: Callable,
    date_formatter: Callable[[int], str],
    export_dir: str,
    share_channel=None,
    today: Optional[date] = None,
) -> str:
    """Same as export_to_csv, as an .xlsx file."""
    wb = build_workbook(equipment, t, date_formatter)
    file_path = os.path.join(export_dir, export_filename(today, "xlsx"))

    try:
        os.makedirs(export_dir, exist_ok=True)
        wb.save(file_path)
    except OSError as e:
        logger.error(f"Error exporting to Excel: {e}")
        raise ExportUnavailableError(f"{ExportMessages.EXPORT_ERROR}: {e}") from e
    finally:
        wb.close()

    logger.info(f"Excel export written: {file_path}")
    _share(file_path, share_channel, XLSX_MIME_TYPE)
    return file_path
