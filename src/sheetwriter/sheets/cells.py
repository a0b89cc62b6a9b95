"""
Translation of plain python values into sheets cell structures.

A row is just a list of python values.  Each value is classified into a
cell type and then turned into a CellData with the matching
userEnteredValue.  Dates go in as a number, the 'serial number' days
since the spreadsheet epoch of 1899-12-30, which is what Sheets stores
internally for dates and is then displayed via a number format.

Strings are checked for something that looks like a YYYY-MM-DD date
anywhere in them and, if so, are treated as dates.  This is a best
effort convenience and it will happily mistake e.g. 'order 2020-01-01b'
for a date.  Wrap a value in TypedValue to say exactly what it is and
skip the guessing.
"""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from numbers import Real
from typing import Any, Iterable, List
import copy
import datetime
import logging
import math
import re

from ..exceptions import TranslationError
from .resources import CellData, CellFormat, ExtendedValue, RowData

logger = logging.getLogger(__name__)

# not anchored, matches anywhere in the string
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

SPREADSHEET_EPOCH = datetime.datetime(1899, 12, 30, tzinfo=datetime.timezone.utc)
SECONDS_PER_DAY = 24 * 60 * 60

class CellType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    EMPTY = "empty"

@dataclass
class TypedValue():
    """
    A value with an explicit cell type, bypassing classify().
    TypedValue(CellType.TEXT, "2019-12-25") is written as the literal string.
    """
    type: CellType|str
    value: Any

    def __post_init__(self) -> None:
        self.type = CellType(self.type)

    @classmethod
    def text(cls, value: Any) -> "TypedValue":
        return cls(CellType.TEXT, value)

    @classmethod
    def number(cls, value: Any) -> "TypedValue":
        return cls(CellType.NUMBER, value)

    @classmethod
    def boolean(cls, value: Any) -> "TypedValue":
        return cls(CellType.BOOLEAN, value)

    @classmethod
    def date(cls, value: Any) -> "TypedValue":
        return cls(CellType.DATE, value)

def classify(value: Any) -> CellType:
    """
    Work out the cell type of a python value.
    bool has to be checked before numbers as bool is an int.
    """
    if isinstance(value, TypedValue):
        return value.type
    if value is None:
        return CellType.EMPTY
    if isinstance(value, bool):
        return CellType.BOOLEAN
    if isinstance(value, (Real, Decimal)):
        return CellType.NUMBER
    if isinstance(value, datetime.date):
        return CellType.DATE
    if isinstance(value, str):
        return CellType.DATE if _DATE_RE.search(value) else CellType.TEXT
    raise TranslationError(f"Unsupported cell value type: {type(value).__name__}")

def _parse_date(text: str) -> datetime.datetime:
    try:
        return datetime.datetime.fromisoformat(text.strip())
    except ValueError as e:
        raise TranslationError(f"Cannot parse date value: {text!r}") from e

def to_spreadsheet_epoch(value: str|datetime.date|None = None) -> float:
    """
    Convert a date to days since 1899-12-30, fractional part being the time of day.
    Accepts ISO 8601 text, a date or a datetime.  Anything without a timezone
    is taken as UTC.  No value means 'now'.
    """
    if value is None:
        dt = datetime.datetime.now(datetime.timezone.utc)
    elif isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, datetime.date):
        dt = datetime.datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        dt = _parse_date(value)
    else:
        raise TranslationError(f"Not a date value: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return (dt - SPREADSHEET_EPOCH).total_seconds() / SECONDS_PER_DAY

def _to_number(value: Any) -> int|float:
    if isinstance(value, bool):
        raise TranslationError(f"Not a number: {value!r}")
    if isinstance(value, (int, float)):
        n = value
    else:
        try:
            n = float(value)
        except (TypeError, ValueError) as e:
            raise TranslationError(f"Not a number: {value!r}") from e
    if isinstance(n, float) and not math.isfinite(n):
        raise TranslationError(f"Cannot write non finite number: {value!r}")
    return n

def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise TranslationError(f"Not a boolean: {value!r}")

def serialize_value(value: Any) -> CellData:
    """Turn one python value into a CellData"""
    cell_type = classify(value)
    raw = value.value if isinstance(value, TypedValue) else value
    if cell_type == CellType.EMPTY or raw is None:
        return CellData()
    if cell_type == CellType.DATE:
        return CellData(ExtendedValue(numberValue=to_spreadsheet_epoch(raw)))
    if cell_type == CellType.NUMBER:
        return CellData(ExtendedValue(numberValue=_to_number(raw)))
    if cell_type == CellType.BOOLEAN:
        return CellData(ExtendedValue(boolValue=_to_bool(raw)))
    return CellData(ExtendedValue(stringValue=str(raw)))

def serialize_row(row: Iterable[Any]) -> RowData:
    """
    One row of values, column index being the position in the row.
    """
    return RowData([serialize_value(v) for v in row])

def serialize_rows(rows: Iterable[Iterable[Any]]) -> List[RowData]:
    return [serialize_row(r) for r in rows]

class CellFormatKeyword():
    """
    Named column formats.  Like the sheets 'enums' a keyword is just a
    string, this maps it to the CellFormat fields it sets.
    """
    INTEGER = "INTEGER"
    BOLD = "BOLD"
    SPECIAL_DATE = "SPECIAL_DATE"
    BR_DATE = "BR_DATE"
    BR_DATE_TIME = "BR_DATE_TIME"

    _FORMATS = {
        INTEGER: {"numberFormat": {"type": "NUMBER", "pattern": "#,#0"}},
        BOLD: {"textFormat": {"bold": True}},
        SPECIAL_DATE: {"numberFormat": {"type": "DATE", "pattern": "mmm.-yy"}},
        BR_DATE: {"numberFormat": {"type": "DATE", "pattern": "dd/mm/yyyy"}},
        BR_DATE_TIME: {"numberFormat": {"type": "DATE", "pattern": "dd/mm/yyyy hh:mm:ss"}},
    }

    @classmethod
    def fragment(cls, keyword: str) -> dict:
        """CellFormat fields for a keyword, empty if it isn't one we know"""
        return copy.deepcopy(cls._FORMATS.get(str(keyword), {}))

def build_format_style(formats: Iterable[str] = ()) -> CellFormat:
    """
    Merge the formats for each keyword in order into one CellFormat.
    A later keyword replaces whatever an earlier one set for the same field
    (e.g. two number formats), different fields accumulate.
    Unknown keywords are skipped.
    """
    style = CellFormat()
    for f in formats:
        fragment = CellFormatKeyword.fragment(f)
        if not fragment:
            logger.debug("ignoring unknown format keyword %r", f)
            continue
        style.update_fields(**fragment)
    return style
