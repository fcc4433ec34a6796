"""Lay rows out as a single sheet and encode it as xlsx or csv."""

import csv
import io
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import xlsxwriter

from order_export.models import ExportFormat
from order_export.rows import ExportRow

SHEET_NAME = "Orders"
MAX_COLUMN_WIDTH = 255

Cell = str | int | float


@dataclass(frozen=True)
class Sheet:
    """Ordered columns plus rectangular rows of cells."""

    name: str
    columns: tuple[str, ...]
    rows: tuple[tuple[Cell, ...], ...]
    widths: tuple[int, ...]


def column_order(rows: Sequence[ExportRow]) -> list[str]:
    """Union of all row keys in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def _width(value: Cell) -> int:
    return len(str(value))


def build_sheet(rows: Sequence[ExportRow], name: str = SHEET_NAME) -> Sheet:
    """Square off heterogeneous rows; missing keys become empty cells."""
    columns = column_order(rows)
    cells = tuple(tuple(row.get(col, "") for col in columns) for row in rows)
    widths = tuple(
        max([len(col)] + [_width(r[i]) for r in cells]) for i, col in enumerate(columns)
    )
    return Sheet(name=name, columns=tuple(columns), rows=cells, widths=widths)


def encode_xlsx(sheet: Sheet) -> bytes:
    """Encode the sheet as an in-memory xlsx workbook."""
    output = io.BytesIO()
    workbook = xlsxwriter.Workbook(output, {"in_memory": True})
    worksheet = workbook.add_worksheet(sheet.name)

    for col, label in enumerate(sheet.columns):
        worksheet.write_string(0, col, label)
        worksheet.set_column(col, col, min(sheet.widths[col], MAX_COLUMN_WIDTH))

    for row_num, cells in enumerate(sheet.rows, start=1):
        for col, value in enumerate(cells):
            # Strings are never interpreted as formulas or hyperlinks.
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                worksheet.write_number(row_num, col, value)
            else:
                worksheet.write_string(row_num, col, str(value))

    workbook.close()
    return output.getvalue()


def encode_csv(sheet: Sheet) -> bytes:
    """Encode the sheet as comma-separated text (header first), UTF-8."""
    if not sheet.columns:
        return b""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(sheet.columns)
    writer.writerows(sheet.rows)
    return buffer.getvalue().encode("utf-8")


ENCODERS: dict[ExportFormat, Callable[[Sheet], bytes]] = {
    ExportFormat.XLSX: encode_xlsx,
    ExportFormat.CSV: encode_csv,
}


def serialize(rows: Sequence[ExportRow], fmt: ExportFormat) -> bytes:
    return ENCODERS[ExportFormat(fmt)](build_sheet(rows))
