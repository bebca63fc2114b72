"""CSV export of formatted rows.

The header is the column list of the selected `ExportSchema`; existing content
at the output path is replaced, never appended to.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from core.domain.models import ExportRow
from core.domain.schema import ExportSchema
from core.errors import ExportWriteError


def write_csv(
    *,
    rows: Iterable[ExportRow],
    output_path: Path,
    schema: ExportSchema = ExportSchema.FULL,
) -> int:
    """Write the header and every row to `output_path`; returns the row count."""

    count = 0
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(schema.columns))
            writer.writeheader()
            for row in rows:
                writer.writerow(row.as_record(schema))
                count += 1
    except OSError as exc:
        raise ExportWriteError(f"Unable to write {output_path}: {exc}") from exc
    return count


def read_csv(path: Path) -> tuple[list[str], list[dict[str, str]]]:
    """Read an export back as `(header, rows)`."""

    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        rows = list(reader)
        return list(reader.fieldnames or []), rows
