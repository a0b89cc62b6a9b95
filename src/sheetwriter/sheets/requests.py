from dataclasses import dataclass, field
from typing import List
import re

from ..resources import GoogleWorkSpaceResourceBase
from .resources import CellData, GridRange, RowData, SheetProperties

class GoogleSheetsUpdateRequestBase(GoogleWorkSpaceResourceBase):
    """
    Base class for sheet batchUpdate requests to get the actual
    request dict into the right format.
    """
    def to_request(self) -> dict[str,dict]:
        name = self.__class__.__name__
        # need to strip off the trailing 'Request' class name and
        # set the first letter to lower case.  could be done
        # several ways but lets go re
        request = {}
        m = re.match("^([a-zA-Z])([a-zA-Z]+)Request$", name)
        if m:
            key = m.group(1).lower() + m.group(2)
            request[key] = self.to_base()
        else:
            raise RuntimeError("Invalid Google Sheets request format for class name")

        return request

@dataclass
class AppendCellsRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#appendcellsrequest
    Rows are added after the last row with data in the sheet, the sheet
    grows if needed.
    """
    sheetId: int
    rows: List[RowData|dict] = field(default_factory=list)
    fields: str = field(default="*")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.rows = [r if isinstance(r, RowData) else RowData(**dict(r)) for r in self.rows]

@dataclass
class RepeatCellRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#repeatcellrequest
    Apply the same cell to every cell in the range, limited to what
    the fields mask names.
    """
    range: GridRange|dict
    cell: CellData|dict
    fields: str

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.range = self.range if isinstance(self.range, GridRange) else GridRange(**dict(self.range))
        self.cell = self.cell if isinstance(self.cell, CellData) else CellData(**dict(self.cell))

@dataclass
class UpdateSheetPropertiesRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatesheetpropertiesrequest
    """
    properties: SheetProperties|dict
    fields: str

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = (self.properties if isinstance(self.properties, SheetProperties)
                           else SheetProperties(**dict(self.properties)))

@dataclass
class GoogleSheetsUpdateRequest(GoogleWorkSpaceResourceBase):
    """
    Generate a GSheet Batch Update request body.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#request-body
    """
    requests: List[GoogleSheetsUpdateRequestBase|dict]
    includeSpreadsheetInResponse: bool|None = field(default=None)
    responseRanges: List[str]|None = field(default=None)
    responseIncludeGridData: bool|None = field(default=None)

    def __len__(self) -> int:
        return len(self.requests)

    def to_base(self) -> dict:
        b = {
            "requests": [r.to_request() if isinstance(r, GoogleSheetsUpdateRequestBase) else r
                         for r in self.requests],
            "includeSpreadsheetInResponse": self.includeSpreadsheetInResponse,
            "responseRanges": self.responseRanges,
            "responseIncludeGridData": self.responseIncludeGridData
        }
        return {k: v for k,v in b.items() if v is not None}

@dataclass
class GoogleSheetsUpdateRequestResponse(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#response-body
    """
    spreadsheetId: str = field(default="")
    replies: List[dict] = field(default_factory=list)
    updatedSpreadsheet: dict = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)
