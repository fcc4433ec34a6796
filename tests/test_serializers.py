import csv
import io

import openpyxl
import pytest

from order_export.models import ExportFormat
from order_export.serializers import SHEET_NAME, build_sheet, column_order, encode_csv, serialize

ROWS = [
    {"Order Number": "#1", "Item Title": "Mug", "Item Quantity": 2},
    {"Order Number": "#2", "Line Items": "1x Poster"},
]


def _read_csv(payload: bytes) -> list[list[str]]:
    return list(csv.reader(io.StringIO(payload.decode("utf-8"), newline="")))


def _read_xlsx(payload: bytes):
    workbook = openpyxl.load_workbook(io.BytesIO(payload))
    return workbook, workbook[SHEET_NAME]


def test_column_union_in_first_seen_order():
    assert column_order(ROWS) == ["Order Number", "Item Title", "Item Quantity", "Line Items"]


def test_sheet_is_rectangular():
    sheet = build_sheet(ROWS)
    assert all(len(r) == len(sheet.columns) for r in sheet.rows)
    assert sheet.rows[0] == ("#1", "Mug", 2, "")
    assert sheet.rows[1] == ("#2", "", "", "1x Poster")


def test_widths_cover_labels_and_values():
    sheet = build_sheet([{"A": "long value here", "Quantity": 3}])
    assert sheet.widths == (len("long value here"), len("Quantity"))


def test_csv_header_and_cells():
    rows = _read_csv(serialize(ROWS, ExportFormat.CSV))
    assert rows[0] == ["Order Number", "Item Title", "Item Quantity", "Line Items"]
    assert rows[1] == ["#1", "Mug", "2", ""]
    assert rows[2] == ["#2", "", "", "1x Poster"]


@pytest.mark.parametrize("value", [
    'Ships to "Main St", Springfield',
    "line one\nline two",
    '""',
])
def test_csv_escaping_round_trips(value):
    rows = _read_csv(serialize([{"Notes": value}], "csv"))
    assert rows == [["Notes"], [value]]


def test_xlsx_single_orders_sheet():
    workbook, sheet = _read_xlsx(serialize(ROWS, ExportFormat.XLSX))
    assert workbook.sheetnames == ["Orders"]
    values = [[("" if v is None else v) for v in row] for row in sheet.iter_rows(values_only=True)]
    assert values == [
        ["Order Number", "Item Title", "Item Quantity", "Line Items"],
        ["#1", "Mug", 2, ""],
        ["#2", "", "", "1x Poster"],
    ]


def test_xlsx_writes_formula_like_text_as_text():
    _, sheet = _read_xlsx(serialize([{"Notes": "=1+1", "URL": "https://example.com"}], "xlsx"))
    assert sheet["A2"].value == "=1+1"
    assert sheet["A2"].data_type == "s"
    assert sheet["B2"].value == "https://example.com"


def test_xlsx_column_widths_applied():
    _, sheet = _read_xlsx(serialize([{"Tracking Numbers": "1Z1, 1Z2"}], "xlsx"))
    assert sheet.column_dimensions["A"].width >= len("Tracking Numbers")


def test_zero_rows():
    assert encode_csv(build_sheet([])) == b""
    _, sheet = _read_xlsx(serialize([], ExportFormat.XLSX))
    assert all(v is None for row in sheet.iter_rows(values_only=True) for v in row)


def test_xlsx_column_width_is_capped():
    urls = "\n".join(f"https://tracking.example/{n:04d}" for n in range(40))
    sheet = build_sheet([{"Tracking URLs": urls}])
    assert sheet.widths[0] > 255
    _, worksheet = _read_xlsx(serialize([{"Tracking URLs": urls}], "xlsx"))
    assert worksheet.column_dimensions["A"].width <= 256
