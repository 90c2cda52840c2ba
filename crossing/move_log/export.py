"""
CSV Export - One row per logged event.

Every field is quoted so cargo descriptions containing commas stay in
their column.
"""

from __future__ import annotations
import csv
import io
from typing import Iterable

from .records import LogRecord

CSV_COLUMNS = [
    "sequence",
    "operation",
    "target",
    "left_cat",
    "left_rabbit",
    "left_vegetable",
    "right_cat",
    "right_rabbit",
    "right_vegetable",
    "boat_cargo",
]


def record_row(record: LogRecord) -> list[str]:
    """The CSV cells for one record."""
    values = record.model_dump(mode="json")
    return ["" if values[column] is None else str(values[column]) for column in CSV_COLUMNS]


def export_csv(records: Iterable[LogRecord]) -> str:
    """Render records, in sequence order, as CSV text with a header row."""
    ordered = sorted(records, key=lambda r: (r.user_id, r.session_number, r.sequence))

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for record in ordered:
        writer.writerow(record_row(record))
    return buffer.getvalue()
