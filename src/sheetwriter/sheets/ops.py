from dataclasses import fields, is_dataclass, asdict
import logging

import google.auth.exceptions
import googleapiclient.errors
import httplib2
from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from ..exceptions import AuthenticationError, RequestError
from .requests import GoogleSheetsUpdateRequest, GoogleSheetsUpdateRequestResponse

logger = logging.getLogger(__name__)

_RESPONSE_FIELDS = {f.name for f in fields(GoogleSheetsUpdateRequestResponse)}

def batchUpdate(service: Resource,
                spreadsheetid: str,
                request: GoogleSheetsUpdateRequest|dict,
                num_retries: int = 0) -> GoogleSheetsUpdateRequestResponse:
    """
    Wrapper for calling the batchUpdate() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate
    The whole batch is applied or none of it is.  Any failure from the
    remote end comes back as a RequestError (or AuthenticationError if the
    credentials were refused) carrying the original message.
    """
    if not spreadsheetid:
        raise ValueError("batchUpdate() needs a spreadsheet id")
    body = (request.to_base() if isinstance(request, GoogleSheetsUpdateRequest) else
            asdict(request) if is_dataclass(request) else request)
    logger.debug("batchUpdate %s with %d request(s)", spreadsheetid, len(body.get("requests", [])))
    try:
        response = service.spreadsheets().batchUpdate(spreadsheetId=spreadsheetid,
                                                      body=body).execute(num_retries=num_retries)
    except HttpError as e:
        status = e.resp.status if e.resp is not None else None
        logger.error("batchUpdate %s failed (%s): %s", spreadsheetid, status, e.reason)
        raise RequestError(e.reason or str(e), status) from e
    except google.auth.exceptions.TransportError as e:
        # token refresh could not reach the auth server, not a rejection
        logger.error("batchUpdate %s token refresh transport failure: %s", spreadsheetid, e)
        raise RequestError(str(e)) from e
    except google.auth.exceptions.GoogleAuthError as e:
        logger.error("batchUpdate %s credentials rejected: %s", spreadsheetid, e)
        raise AuthenticationError(str(e)) from e
    except (googleapiclient.errors.Error, httplib2.HttpLib2Error, OSError) as e:
        logger.error("batchUpdate %s transport failure: %s", spreadsheetid, e)
        raise RequestError(str(e)) from e
    if response:
        return GoogleSheetsUpdateRequestResponse(**{k: v for k,v in response.items() if k in _RESPONSE_FIELDS})
    return GoogleSheetsUpdateRequestResponse()
