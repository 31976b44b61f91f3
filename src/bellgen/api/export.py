"""Spreadsheet export of generated tables."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd

from ..schema import defaults
from .models import TableResult


def table_to_dataframe(table: TableResult) -> pd.DataFrame:
    """Flatten ``table`` into display form.

    One record per row: the row number, the count for each column label, the
    achieved expectation as a 2-decimal string and the total as a percentage.
    """

    records = []
    for row in table.rows:
        record = {"row": int(row.row_index)}
        for col in table.columns:
            record[col] = int(row.values.get(col, 0))
        record["expectation"] = f"{row.actual_expectation:.2f}"
        record["total"] = f"{int(row.sum)}%"
        records.append(record)
    return pd.DataFrame(records, columns=["row", *table.columns, "expectation", "total"])


def _timestamped_output_name() -> str:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    return f"{stamp}_{defaults.DEFAULT_OUTPUT_NAME}"


def resolve_output_path(output_path: str | Path | None) -> Path:
    raw = output_path if output_path is not None else defaults.DEFAULT_OUTPUT_NAME
    text = str(raw).strip()
    if not text:
        text = defaults.DEFAULT_OUTPUT_NAME

    path = Path(text).expanduser()
    is_dir = (
        text.endswith("/")
        or text.endswith("\\")
        or path.suffix == ""
        or (path.exists() and path.is_dir())
    )
    if is_dir:
        path = path / _timestamped_output_name()
    return path


def export_excel(
    table: TableResult, output_path: str | Path | None = None, sheet_name="Sheet1"
) -> Path:
    """Write ``table`` to an ``.xlsx`` workbook and return the file path."""

    path = resolve_output_path(output_path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    frame = table_to_dataframe(table)
    try:
        frame.to_excel(path, sheet_name=sheet_name, index=False)
    except ModuleNotFoundError as exc:
        if getattr(exc, "name", "") == "openpyxl":
            raise RuntimeError(
                "Saving Excel output requires openpyxl. "
                "Install with `pip install openpyxl`."
            ) from exc
        raise
    return path
