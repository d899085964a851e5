"""CSV export and import of sprint lists.

The header row is written bare; data rows quote every text field and leave
numbers unquoted. Sprint ids and external links are not part of the CSV
columns, so imported sprints get fresh ids.
"""

from __future__ import annotations

import csv
import io
import math
import re
import time
from typing import Callable

from src.errors.boundary import OperationResult, with_error_handling
from src.tracker.exceptions import CsvFormatError
from src.tracker.models import Sprint

EMPTY_EXPORT = "No data to export"

# Header label -> Sprint attribute, in column order
CSV_COLUMNS: list[tuple[str, str]] = [
    ("Sprint Name", "sprint_name"),
    ("Business Days", "business_days"),
    ("Number of People", "number_of_people"),
    ("Working Hours", "working_hours"),
    ("Total Points in Sprint", "total_points_in_sprint"),
    ("Carry Over Points Total", "carry_over_points_total"),
    ("Carry Over Points Completed", "carry_over_points_completed"),
    ("New Work Points", "new_work_points"),
    ("Unplanned Points Brought In", "unplanned_points_brought_in"),
    ("Points Completed", "points_completed"),
    ("Planned Points", "planned_points"),
    ("Percent Complete", "percent_complete"),
    ("Velocity", "velocity"),
    ("Predicted Capacity", "predicted_capacity"),
    ("Created At", "created_at"),
    ("Updated At", "updated_at"),
]

CSV_HEADERS = [label for label, _ in CSV_COLUMNS]

TEXT_ATTRIBUTES = {"sprint_name", "created_at", "updated_at"}

_INTEGER_LITERAL = re.compile(r"^[+-]?\d+$")


def encode_csv(sprints: list[Sprint]) -> str:
    """Render sprints as CSV text, or the empty-export sentinel for no sprints."""
    if not sprints:
        return EMPTY_EXPORT

    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for sprint in sprints:
        writer.writerow([getattr(sprint, attr) for _, attr in CSV_COLUMNS])
    return buffer.getvalue().rstrip("\n")


def _parse_number(raw: str) -> int | float | None:
    text = raw.strip()
    if not text:
        return None
    if _INTEGER_LITERAL.match(text):
        return int(text)
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _default_id_factory() -> Callable[[int], str]:
    stamp = int(time.time() * 1000)
    return lambda index: f"imported-{stamp}-{index}"


def parse_csv(text: str, id_factory: Callable[[int], str] | None = None) -> list[Sprint]:
    """Parse CSV text into sprints.

    Raises:
        CsvFormatError: On text the csv reader rejects, a missing data
            section, a short row or a non-numeric value in a numeric column.
    """
    try:
        rows = [
            row for row in csv.reader(io.StringIO(text.strip())) if any(cell.strip() for cell in row)
        ]
    except csv.Error as e:
        raise CsvFormatError(f"Invalid CSV format: {e}", {"reason": str(e)}) from None
    if len(rows) < 2:
        raise CsvFormatError(
            "Invalid CSV format: No data rows found", {"rows": len(rows)}
        )

    make_id = id_factory or _default_id_factory()
    header = rows[0]
    sprints: list[Sprint] = []
    for index, row in enumerate(rows[1:]):
        row_number = index + 2
        if len(row) < len(header) or len(row) < len(CSV_COLUMNS):
            raise CsvFormatError(
                f"Invalid CSV format: Row {row_number} has insufficient columns",
                {"row": row_number, "columns": len(row), "expected": len(header)},
            )

        values: dict[str, object] = {}
        for (label, attr), cell in zip(CSV_COLUMNS, row):
            if attr in TEXT_ATTRIBUTES:
                values[attr] = cell
                continue
            number = _parse_number(cell)
            if number is None:
                raise CsvFormatError(
                    f"Invalid data in row {row_number}: "
                    "Required numeric fields are missing or invalid",
                    {"row": row_number, "column": label, "value": cell},
                )
            values[attr] = number

        sprints.append(Sprint(id=make_id(index), **values))
    return sprints


def decode_csv(
    text: str, id_factory: Callable[[int], str] | None = None
) -> OperationResult[list[Sprint]]:
    return with_error_handling(lambda: parse_csv(text, id_factory), "decode_csv")
