from unittest.mock import MagicMock, patch

import googleapiclient.errors
import httplib2
import pytest
from google.auth.credentials import Credentials
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from sheetwriter.access import GoogleSheetsSession
from sheetwriter.exceptions import AuthenticationError, RequestError, TranslationError
from sheetwriter.sheets.cells import to_spreadsheet_epoch
from sheetwriter.sheets.spreadsheet import GoogleSpreadSheet

SPREADSHEET_ID = "1EoVKoOKPnnykMBK1bumvDWODp7mW9aAtdhE4B2qTgYY"

@pytest.fixture
def service():
    s = MagicMock()
    s.spreadsheets.return_value.batchUpdate.return_value.execute.return_value = {
        "spreadsheetId": SPREADSHEET_ID, "replies": [{}]
    }
    return s

@pytest.fixture
def spreadsheet(service):
    session = GoogleSheetsSession(MagicMock(spec=Credentials))
    with patch("sheetwriter.access.build", return_value=service):
        yield GoogleSpreadSheet(session, SPREADSHEET_ID)

def sent_bodies(service) -> list[dict]:
    return [c.kwargs["body"] for c in service.spreadsheets.return_value.batchUpdate.call_args_list]

def test_requires_id():
    with pytest.raises(ValueError):
        GoogleSpreadSheet(GoogleSheetsSession(MagicMock(spec=Credentials)), "")

def test_add_header(spreadsheet, service):
    response = spreadsheet.addHeader(0, ["Name", "Phone", "Value", "Date"])
    assert(response)
    assert(response.spreadsheetId == SPREADSHEET_ID)
    batch = service.spreadsheets.return_value.batchUpdate
    batch.assert_called_once()
    assert(batch.call_args.kwargs["spreadsheetId"] == SPREADSHEET_ID)
    assert(sent_bodies(service)[0] == {"requests": [
        {"appendCells": {
            "sheetId": 0,
            "rows": [{"values": [{"userEnteredValue": {"stringValue": "Name"}},
                                 {"userEnteredValue": {"stringValue": "Phone"}},
                                 {"userEnteredValue": {"stringValue": "Value"}},
                                 {"userEnteredValue": {"stringValue": "Date"}}]}],
            "fields": "*"}},
        {"repeatCell": {
            "range": {"sheetId": 0, "startRowIndex": 0, "endRowIndex": 1},
            "cell": {"userEnteredFormat": {"horizontalAlignment": "CENTER",
                                           "textFormat": {"fontSize": 12, "bold": True}}},
            "fields": "userEnteredFormat(textFormat,horizontalAlignment)"}},
        {"updateSheetProperties": {
            "properties": {"sheetId": 0, "gridProperties": {"frozenRowCount": 1}},
            "fields": "gridProperties.frozenRowCount"}}
    ]})

def test_add_rows(spreadsheet, service):
    spreadsheet.addRows(211909232, [["Est 1", "teste", 2250, "2019-12-25"],
                                    ["Est 2", True, 10350.5, None]])
    assert(sent_bodies(service) == [{"requests": [{"appendCells": {
        "sheetId": 211909232,
        "rows": [{"values": [{"userEnteredValue": {"stringValue": "Est 1"}},
                             {"userEnteredValue": {"stringValue": "teste"}},
                             {"userEnteredValue": {"numberValue": 2250}},
                             {"userEnteredValue": {"numberValue": 43824}}]},
                 {"values": [{"userEnteredValue": {"stringValue": "Est 2"}},
                             {"userEnteredValue": {"boolValue": True}},
                             {"userEnteredValue": {"numberValue": 10350.5}},
                             {}]}],
        "fields": "*"}}]}])

def test_add_no_rows(spreadsheet, service):
    response = spreadsheet.addRows(0, [])
    assert(response.spreadsheetId == SPREADSHEET_ID)
    service.spreadsheets.return_value.batchUpdate.assert_not_called()

def test_add_rows_bad_date_sends_nothing(spreadsheet, service):
    with pytest.raises(TranslationError):
        spreadsheet.addRows(0, [["ok", "2019-02-31"]])
    service.spreadsheets.return_value.batchUpdate.assert_not_called()

def test_change_format(spreadsheet, service):
    spreadsheet.changeFormat(0, 3, ["BR_DATE_TIME", "BOLD"])
    assert(sent_bodies(service) == [{"requests": [{"repeatCell": {
        "range": {"sheetId": 0, "startRowIndex": 1, "startColumnIndex": 3, "endColumnIndex": 4},
        "cell": {"userEnteredFormat": {"numberFormat": {"type": "DATE", "pattern": "dd/mm/yyyy hh:mm:ss"},
                                       "textFormat": {"bold": True}}},
        "fields": "userEnteredFormat"}}]}])
    with pytest.raises(ValueError):
        spreadsheet.changeFormat(0, -1, ["BOLD"])

def test_change_format_unknown_clears(spreadsheet, service):
    spreadsheet.changeFormat(5, 0, ["UNKNOWN"])
    body = sent_bodies(service)[0]
    assert(body["requests"][0]["repeatCell"]["cell"] == {"userEnteredFormat": {}})

def test_end_to_end(spreadsheet, service):
    spreadsheet.addHeader(0, ["Name", "Phone", "Value", "Date"])
    spreadsheet.addRows(0, [["Mary", "973673-392", 1, "1980-07-12T14:00:20.000Z"]])
    spreadsheet.changeFormat(0, 2, ["BOLD", "INTEGER"])
    bodies = sent_bodies(service)
    assert(len(bodies) == 3)
    assert([len(b["requests"]) for b in bodies] == [3, 1, 1])
    assert(bodies[1]["requests"][0]["appendCells"]["rows"][0]["values"][3] ==
           {"userEnteredValue": {"numberValue": to_spreadsheet_epoch("1980-07-12T14:00:20.000Z")}})
    assert(bodies[2]["requests"][0]["repeatCell"]["cell"]["userEnteredFormat"] ==
           {"numberFormat": {"type": "NUMBER", "pattern": "#,#0"}, "textFormat": {"bold": True}})
    execute = service.spreadsheets.return_value.batchUpdate.return_value.execute
    assert(execute.call_count == 3)
    execute.assert_called_with(num_retries=0)

def test_chain_is_one_request(spreadsheet, service):
    chain = (spreadsheet.updateRequests()
             .header(0, ["a", "b"])
             .appendRows(0, [[1, 2], [3, 4]])
             .format(0, 1, ["INTEGER"]))
    assert(len(chain) == 5)
    chain.execute()
    bodies = sent_bodies(service)
    assert(len(bodies) == 1)
    assert([list(r.keys())[0] for r in bodies[0]["requests"]] ==
           ["appendCells", "repeatCell", "updateSheetProperties", "appendCells", "repeatCell"])

def test_retries_from_session(service):
    session = GoogleSheetsSession(MagicMock(spec=Credentials), num_retries=3)
    with patch("sheetwriter.access.build", return_value=service):
        GoogleSpreadSheet(session, SPREADSHEET_ID).addRows(0, [["x"]])
    service.spreadsheets.return_value.batchUpdate.return_value.execute.assert_called_once_with(num_retries=3)

def test_http_error_is_wrapped(spreadsheet, service):
    resp = MagicMock(status=400, reason="Bad Request")
    error = HttpError(resp, b'{"error": {"code": 400, "message": "Invalid requests[0].appendCells"}}')
    service.spreadsheets.return_value.batchUpdate.return_value.execute.side_effect = error
    with pytest.raises(RequestError) as excinfo:
        spreadsheet.addRows(0, [["x"]])
    assert("Invalid requests[0].appendCells" in str(excinfo.value))
    assert(excinfo.value.status == 400)
    assert(excinfo.value.__cause__ is error)

def test_transport_error_is_wrapped(spreadsheet, service):
    service.spreadsheets.return_value.batchUpdate.return_value.execute.side_effect = TimeoutError("timed out")
    with pytest.raises(RequestError) as excinfo:
        spreadsheet.changeFormat(0, 0, ["BOLD"])
    assert(str(excinfo.value) == "timed out")
    assert(excinfo.value.status is None)

def test_rejected_credentials(spreadsheet, service):
    service.spreadsheets.return_value.batchUpdate.return_value.execute.side_effect = RefreshError("invalid_grant")
    with pytest.raises(AuthenticationError):
        spreadsheet.addHeader(0, ["a"])

def test_server_not_found_is_wrapped(spreadsheet, service):
    error = httplib2.ServerNotFoundError("Unable to find the server at sheets.googleapis.com")
    service.spreadsheets.return_value.batchUpdate.return_value.execute.side_effect = error
    with pytest.raises(RequestError) as excinfo:
        spreadsheet.addRows(0, [["x"]])
    assert("Unable to find the server" in str(excinfo.value))
    assert(excinfo.value.__cause__ is error)

def test_client_library_error_is_wrapped(spreadsheet, service):
    service.spreadsheets.return_value.batchUpdate.return_value.execute.side_effect = \
        googleapiclient.errors.Error("unexpected response")
    with pytest.raises(RequestError):
        spreadsheet.changeFormat(0, 1, ["INTEGER"])

def test_token_refresh_transport_failure(spreadsheet, service):
    service.spreadsheets.return_value.batchUpdate.return_value.execute.side_effect = \
        TransportError("Failed to connect to oauth2.googleapis.com")
    with pytest.raises(RequestError) as excinfo:
        spreadsheet.addHeader(0, ["a"])
    assert(not isinstance(excinfo.value, AuthenticationError))
    assert("oauth2.googleapis.com" in str(excinfo.value))

def test_negative_sheet_id(spreadsheet, service):
    with pytest.raises(ValueError):
        spreadsheet.addRows(-1, [["x"]])
    with pytest.raises(ValueError):
        spreadsheet.addHeader(-1, ["a"])
    with pytest.raises(ValueError):
        spreadsheet.changeFormat(-1, 0, ["BOLD"])
    with pytest.raises(ValueError):
        spreadsheet.updateRequests().freezeRows(-1, 1)
    service.spreadsheets.return_value.batchUpdate.assert_not_called()
