"""
Class implementations of the sheets resources that go into a batchUpdate.
As these are just logical groupings of data fields we use dataclasses
to implement.  dataclasses.asdict() gives the nested dict the request
client needs; going the other way (dict -> dataclass) is handled in
fixup() so any nested field can be given either as the dataclass or as
the raw dict.
Fields default to None which means 'not set' and they are dropped when
converting with to_base().
Only the resources needed to write cells and formats are implemented.
"""
from dataclasses import dataclass, field
from typing import List, ClassVar

from ..resources import GoogleWorkSpaceResourceBase

@dataclass
class ExtendedValue(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#extendedvalue
    Only one of the value fields should be set.
    """
    numberValue: int|float|None = field(default=None)
    stringValue: str|None = field(default=None)
    boolValue: bool|None = field(default=None)
    formulaValue: str|None = field(default=None)

    def __bool__(self) -> bool:
        return any(v is not None for v in (self.numberValue, self.stringValue,
                                           self.boolValue, self.formulaValue))

@dataclass
class NumberFormat(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#numberformat
    """
    type: str|None = field(default=None)
    pattern: str|None = field(default=None)

    valid_values: ClassVar[List[str]] = ['TEXT', 'NUMBER', 'PERCENT',
                                         'CURRENCY', 'DATE', 'TIME',
                                         'DATE_TIME', 'SCIENTIFIC']

    def __post_init__(self) -> None:
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.type) and self.type in self.valid_values

    def fixup(self) -> None:
        if self.type:
            t = str(self.type).upper()
            if t not in self.valid_values:
                raise ValueError('Invalid number format type: ' + t)
            self.type = t

@dataclass
class TextFormat(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#textformat
    """
    fontFamily: str|None = field(default=None)
    fontSize: int|None = field(default=None)
    bold: bool|None = field(default=None)
    italic: bool|None = field(default=None)
    strikethrough: bool|None = field(default=None)
    underline: bool|None = field(default=None)

@dataclass
class CellFormat(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#cellformat
    This is what ends up as 'userEnteredFormat' on a cell.
    """
    numberFormat: NumberFormat|dict|None = field(default=None)
    textFormat: TextFormat|dict|None = field(default=None)
    horizontalAlignment: str|None = field(default=None)

    valid_alignments: ClassVar[List[str]] = ['LEFT', 'CENTER', 'RIGHT']

    def __post_init__(self) -> None:
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.to_base())

    def fixup(self) -> None:
        if isinstance(self.numberFormat, dict):
            self.numberFormat = NumberFormat(**self.numberFormat)
        if isinstance(self.textFormat, dict):
            self.textFormat = TextFormat(**self.textFormat)
        if self.horizontalAlignment:
            a = str(self.horizontalAlignment).upper()
            if a not in self.valid_alignments:
                raise ValueError(f"Invalid horizontal alignment: {self.horizontalAlignment}")
            self.horizontalAlignment = a

@dataclass
class CellData(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#celldata
    A CellData with nothing set is a blank cell.
    """
    userEnteredValue: ExtendedValue|dict|None = field(default=None)
    userEnteredFormat: CellFormat|dict|None = field(default=None)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if isinstance(self.userEnteredValue, dict):
            self.userEnteredValue = ExtendedValue(**self.userEnteredValue)
        if isinstance(self.userEnteredFormat, dict):
            self.userEnteredFormat = CellFormat(**self.userEnteredFormat)

@dataclass
class RowData(GoogleWorkSpaceResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#rowdata"""
    values: List[CellData|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def __len__(self) -> int:
        return len(self.values)

    def fixup(self) -> None:
        self.values = [c if isinstance(c, CellData) else CellData(**dict(c)) for c in self.values]

@dataclass
class GridRange(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#gridrange
    Indexes are zero based, start inclusive and end exclusive.
    A missing end means unbounded, as in 'to the end of the sheet'.
    """
    sheetId: int = field(default=-1)
    startRowIndex: int|None = field(default=None)
    endRowIndex: int|None = field(default=None)
    startColumnIndex: int|None = field(default=None)
    endColumnIndex: int|None = field(default=None)

    def __bool__(self) -> bool:
        return self.sheetId >= 0

@dataclass
class GridProperties(GoogleWorkSpaceResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#gridproperties"""
    rowCount: int|None = field(default=None)
    columnCount: int|None = field(default=None)
    frozenRowCount: int|None = field(default=None)
    frozenColumnCount: int|None = field(default=None)
    hideGridlines: bool|None = field(default=None)

@dataclass
class SheetProperties(GoogleWorkSpaceResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheetproperties"""
    sheetId: int = field(default=-1)
    title: str|None = field(default=None)
    index: int|None = field(default=None)
    gridProperties: GridProperties|dict|None = field(default=None)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if isinstance(self.gridProperties, dict):
            self.gridProperties = GridProperties(**self.gridProperties)

    def __bool__(self) -> bool:
        return self.sheetId >= 0
