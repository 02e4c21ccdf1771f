# diamond_loader/utils/parser.py
import csv
import io
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from diamond_loader.core.config import settings
from diamond_loader.core.exceptions import ParseError
from diamond_loader.schemas.validation import RawRecord

TAB = "\t"
SPREADSHEET_SUFFIXES = (".xlsx",)


def clean_cell(value) -> str:
    if value is None:
        return ""
    return str(value).strip().replace('"', "")


def detect_delimiter(header_line: str, default: str = TAB) -> str:
    for candidate in (TAB, ",", ";"):
        if candidate in header_line:
            return candidate
    return default


def build_records(headers: Sequence[str], rows: Iterable[Sequence]) -> List[RawRecord]:
    """
    Zip each row with the header. Short rows are padded with "", surplus
    cells and columns with a blank header are dropped, and rows with no
    non-empty value are skipped. Row numbers count data lines from 1 and
    are kept for skipped rows, so they always point back at the source line.
    """
    records: List[RawRecord] = []
    for idx, cells in enumerate(rows, start=1):
        values: Dict[str, str] = {}
        for col, header in enumerate(headers):
            if not header:
                continue
            values[header] = clean_cell(cells[col]) if col < len(cells) else ""
        if not any(v != "" for v in values.values()):
            continue
        records.append(RawRecord(row=idx, values=values))
    return records


def _check_headers(headers: List[str]) -> List[str]:
    named = [h for h in headers if h]
    if not named:
        raise ParseError("Header row has no column names")
    dupes = sorted({h for h in named if named.count(h) > 1})
    if dupes:
        raise ParseError(f"Duplicate header columns: {', '.join(dupes)}", details={"headers": named})
    return named


def split_lines(text: str) -> List[str]:
    """Non-empty lines, split on \\n or \\r\\n only so in-cell breaks like U+2028 survive."""
    return [line for line in re.split(r"\r?\n", text) if line.strip()]


def parse_records(text: str, delimiter: str = TAB) -> Tuple[List[str], List[RawRecord]]:
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = split_lines(text)
    if len(lines) < 2:
        raise ParseError("File must contain at least a header row and one data row")

    # dealer tab exports carry stray quotes; other delimiters follow csv quoting
    quoting = csv.QUOTE_NONE if delimiter == TAB else csv.QUOTE_MINIMAL
    reader = csv.reader(lines, delimiter=delimiter, quoting=quoting)
    try:
        header_cells = [clean_cell(h) for h in next(reader)]
        headers = _check_headers(header_cells)
        return headers, build_records(header_cells, reader)
    except csv.Error as e:
        raise ParseError(f"Could not read line {reader.line_num}: {e}") from e


def parse_spreadsheet(content: bytes) -> Tuple[List[str], List[RawRecord]]:
    try:
        # header=None keeps duplicate header names as written
        df = pd.read_excel(io.BytesIO(content), dtype=str, header=None)
    except Exception as e:
        raise ParseError(f"Could not read spreadsheet: {e}") from e
    df = df.fillna("")
    if len(df.index) < 2:
        raise ParseError("File must contain at least a header row and one data row")

    header_cells = [clean_cell(c) for c in df.iloc[0].tolist()]
    headers = _check_headers(header_cells)
    return headers, build_records(header_cells, df.iloc[1:].values.tolist())


def parse_upload(
    filename: str,
    content: bytes,
    delimiter: Optional[str] = None,
) -> Tuple[List[str], List[RawRecord]]:
    """Parse an uploaded export: spreadsheets by suffix, anything else as delimited text."""
    if (filename or "").lower().endswith(SPREADSHEET_SUFFIXES):
        return parse_spreadsheet(content)

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ParseError("Invalid file encoding, please save as UTF-8 (with or without BOM).")

    if delimiter is None:
        first = next(iter(split_lines(text)), "")
        delimiter = detect_delimiter(first, settings.DEFAULT_DELIMITER)
    return parse_records(text, delimiter)


def load_records(path: str, delimiter: Optional[str] = None) -> Tuple[List[str], List[RawRecord]]:
    p = Path(path)
    return parse_upload(p.name, p.read_bytes(), delimiter)
