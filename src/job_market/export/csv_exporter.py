"""CSV export of tier analyses."""

from __future__ import annotations

import csv
import json
import logging
import re
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import BaseModel

from job_market.models.filters import Filters

logger = logging.getLogger(__name__)

LINE_TERMINATOR = "\r\n"


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        # JSON array text keeps element boundaries unambiguous
        return json.dumps([_cell(v) for v in value], ensure_ascii=False)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _flatten(row: BaseModel | Mapping[str, Any]) -> dict[str, str]:
    if isinstance(row, BaseModel):
        data = row.model_dump(mode="json")
    else:
        data = dict(row)
    return {str(key): _cell(value) for key, value in data.items()}


def to_csv(rows: Sequence[BaseModel | Mapping[str, Any]]) -> str:
    """Render rows as CSV text, header first, rows in the given order.

    Raises:
        ValueError: if ``rows`` is empty or the rows do not share one field set.
    """
    if not rows:
        raise ValueError("No rows to export")

    flat = [_flatten(row) for row in rows]
    columns = list(flat[0])
    expected = set(columns)
    for index, row in enumerate(flat[1:], start=1):
        if set(row) != expected:
            missing = sorted(expected - set(row))
            extra = sorted(set(row) - expected)
            raise ValueError(
                f"Row {index} does not match the header fields (missing={missing}, extra={extra})"
            )

    df = pd.DataFrame(flat, columns=columns, dtype=str)
    return df.to_csv(
        index=False,
        lineterminator=LINE_TERMINATOR,
        quoting=csv.QUOTE_MINIMAL,
        quotechar='"',
        doublequote=True,
    )


def export_filename(filters: Filters, prefix: str = "job_market_report") -> str:
    """File name reflecting the active filters, e.g. ``job_market_report_BSC_IT.csv``."""
    parts = [prefix]
    for value in filters.constraints().values():
        parts.append(re.sub(r"[^A-Za-z0-9]+", "_", value).strip("_"))
    return "_".join(parts) + ".csv"


def save_csv(content: str, path: str | Path) -> Path:
    """Write CSV text to ``path``, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8", newline="") as f:
        f.write(content)
    logger.info("CSV saved: %s", out)
    return out


def parse_list_cell(cell: str) -> list[str]:
    """Decode a list-valued cell written by ``to_csv``."""
    if not cell:
        return []
    values = json.loads(cell)
    if not isinstance(values, list):
        raise ValueError(f"Expected a JSON array cell, got {type(values).__name__}")
    return [str(v) for v in values]
