from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Self

from google.auth.credentials import Credentials

from ..access import GoogleSheetsSession
from .cells import build_format_style, serialize_rows
from .ops import batchUpdate
from .requests import *
from .resources import CellData, CellFormat, GridProperties, GridRange, SheetProperties, TextFormat

HEADER_FONT_SIZE = 12

class GoogleSpreadSheet():
    """
    A spreadsheet we write into.  Each operation is addressed to a sheet
    (the tabs along the bottom) by its sheetId, which is the integer id of
    the tab, not its title and not its position.  The first sheet of a new
    spreadsheet has sheetId 0.

    Every operation is a single batchUpdate round trip.  Nothing is cached
    locally so there is no state beyond the session and the spreadsheet id.
    An instance can be shared between threads, the session hands each thread
    its own connection.  Nothing orders concurrent calls though, rows appended
    from two threads can land in either order.

        sheet = GoogleSpreadSheet("/path/to/key.json", "<spreadsheet id>")
        sheet.addHeader(0, ["Name", "Phone", "Value", "Date"])
        sheet.addRows(0, [["Mary", "973673-392", 1, "1980-07-12T14:00:20.000Z"]])
        sheet.changeFormat(0, 2, ["BOLD", "INTEGER"])
    """
    def __init__(self, session: GoogleSheetsSession|Mapping|Path|str|Credentials|None,
                 spreadsheet_id: str) -> None:
        if not spreadsheet_id:
            raise ValueError("A spreadsheet id is required")
        self._session = session if isinstance(session, GoogleSheetsSession) else GoogleSheetsSession(session)
        self._spreadsheet_id = str(spreadsheet_id)

    def __bool__(self) -> bool:
        return bool(self._session) and bool(self._spreadsheet_id)

    def __str__(self) -> str:
        return f"{self._spreadsheet_id}<{str(self._session)}>"

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    @property
    def id(self) -> str:
        return self._spreadsheet_id

    @property
    def session(self) -> GoogleSheetsSession:
        return self._session

    def batchUpdate(self, request: GoogleSheetsUpdateRequest|dict) -> GoogleSheetsUpdateRequestResponse:
        """Send a raw batchUpdate request to this spreadsheet"""
        return batchUpdate(self._session.get_service(), self._spreadsheet_id,
                           request, self._session.num_retries)

    def updateRequests(self) -> "_SpreadSheetUpdateChain":
        """
        Start a batchUpdate() chain, makes it easy to append operations to pack
        into a request before sending it.  Everything in the chain is applied
        together or not at all.
        """
        return _SpreadSheetUpdateChain(self)

    def addHeader(self, sheet_id: int, names: Iterable[Any]) -> GoogleSheetsUpdateRequestResponse:
        """
        Append a header row, center and bold it and freeze it.
        Meant for an empty sheet, the styling and freeze always apply to the
        first row regardless of where the row lands.
        """
        return self.updateRequests().header(sheet_id, names).execute()

    def addRows(self, sheet_id: int, rows: Iterable[Iterable[Any]]) -> GoogleSheetsUpdateRequestResponse:
        """
        Append rows after the last row with data.  Calling it twice appends twice.
        """
        return self.updateRequests().appendRows(sheet_id, rows).execute()

    def changeFormat(self, sheet_id: int, column: int, formats: Iterable[str]) -> GoogleSheetsUpdateRequestResponse:
        """
        Apply format keywords to a column (0 based), from the second row down
        so a header is left alone.
        """
        return self.updateRequests().format(sheet_id, column, formats).execute()

class _SpreadSheetUpdateChain():
    """
    Utility class for building up a chain of update requests.
    The spreadsheet batchUpdate method can take a list of requests at once
    and it is more efficient to provide a number of them at once rather than
    request/response/request/response/etc.  So this provides a means to add
    a chain of requests and then terminate with execute().
    The idea is you would:
    response = spreadsheet.updateRequests().appendRows(0, rows).format(0, 2, ["INTEGER"]).execute()
    """
    def __init__(self, spreadsheet: GoogleSpreadSheet) -> None:
        if not spreadsheet:
            raise ValueError("Must be a valid spreadsheet for an update operation")
        self._spreadsheet = spreadsheet
        self._requests = []

    def __len__(self) -> int:
        return len(self._requests)

    def execute(self) -> GoogleSheetsUpdateRequestResponse:
        """
        Terminate a request chain and send the actual batchUpdate.
        An empty chain sends nothing.
        """
        if self._requests:
            return self._spreadsheet.batchUpdate(GoogleSheetsUpdateRequest(list(self._requests)))
        return GoogleSheetsUpdateRequestResponse(self._spreadsheet.id)

    def appendRows(self, sheet_id: int, rows: Iterable[Iterable[Any]]) -> Self:
        """
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#appendcellsrequest
        """
        if not GridRange(sheet_id):
            raise ValueError(f"appendRows(): invalid sheet id {sheet_id}")
        data = serialize_rows(rows)
        if data:
            self._requests.append(AppendCellsRequest(sheet_id, data, "*"))
        return self

    def header(self, sheet_id: int, names: Iterable[Any]) -> Self:
        """
        Append the header row then style and freeze row 0.
        """
        if not GridRange(sheet_id):
            raise ValueError(f"header(): invalid sheet id {sheet_id}")
        self._requests.append(AppendCellsRequest(sheet_id, serialize_rows([names]), "*"))
        style = CellFormat(horizontalAlignment="CENTER",
                           textFormat=TextFormat(fontSize=HEADER_FONT_SIZE, bold=True))
        self._requests.append(RepeatCellRequest(GridRange(sheet_id, startRowIndex=0, endRowIndex=1),
                                                CellData(userEnteredFormat=style),
                                                "userEnteredFormat(textFormat,horizontalAlignment)"))
        return self.freezeRows(sheet_id, 1)

    def freezeRows(self, sheet_id: int, count: int) -> Self:
        """
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatesheetpropertiesrequest
        """
        if count < 0:
            raise ValueError("freezeRows(): count must be >= 0")
        props = SheetProperties(sheet_id, gridProperties=GridProperties(frozenRowCount=count))
        if not props:
            raise ValueError(f"freezeRows(): invalid sheet id {sheet_id}")
        self._requests.append(UpdateSheetPropertiesRequest(props, "gridProperties.frozenRowCount"))
        return self

    def format(self, sheet_id: int, column: int, formats: Iterable[str]) -> Self:
        """
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#repeatcellrequest
        Row 0 is excluded, the range runs from row 1 to the end of the sheet.
        """
        if column < 0:
            raise ValueError("format(): column must be >= 0")
        rng = GridRange(sheet_id, startRowIndex=1, startColumnIndex=column, endColumnIndex=column + 1)
        if not rng:
            raise ValueError(f"format(): invalid sheet id {sheet_id}")
        cell = CellData(userEnteredFormat=build_format_style(formats))
        self._requests.append(RepeatCellRequest(rng, cell, "userEnteredFormat"))
        return self
