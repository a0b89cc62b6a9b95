"""
Thin helpers around the Google Sheets Python client for the common
'dump some rows into a sheet' case.

Plain python values (str, int, float, bool, dates) are translated into
the nested cell structures the batchUpdate endpoint wants, so a caller
can add a header, append rows and format a column without hand writing
request dicts.

Authentication is service account based and held in an explicit
session object rather than a module global.
"""

from .access import GoogleSheetsSession
from .exceptions import AuthenticationError, RequestError, SheetsError, TranslationError
