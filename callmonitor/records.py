"""
Positional five-column CSV decoding.

Rows map onto column1..column5 by position; a header row, when present,
is dropped without being used for field names. Short rows leave the
trailing columns as None, long rows lose their extra values.
"""

from __future__ import annotations
import csv, io
from typing import Iterable, List
import pandas as pd
from .schemas import COLUMNS, Record


def _rows(text: str) -> Iterable[list[str]]:
    for row in csv.reader(io.StringIO(text)):
        if row:
            yield row


def decode_records(text: str, has_header: bool = False) -> List[Record]:
    rows = _rows(text)
    if has_header:
        next(rows, None)
    return [Record(**dict(zip(COLUMNS, row))) for row in rows]


def records_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    return pd.DataFrame([r.model_dump() for r in records], columns=list(COLUMNS))


def records_to_csv(records: Iterable[Record], header: bool = True) -> str:
    return records_to_frame(records).to_csv(index=False, header=header, lineterminator="\n")
