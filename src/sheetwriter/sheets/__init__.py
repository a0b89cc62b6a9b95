"""
Classes to facilitate writing rows and formats into Google Sheets
"""

from .cells import CellFormatKeyword, CellType, TypedValue, build_format_style, classify, serialize_row, serialize_rows, to_spreadsheet_epoch
from .spreadsheet import GoogleSpreadSheet
