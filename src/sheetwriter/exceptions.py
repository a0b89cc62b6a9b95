"""
Errors raised by sheetwriter.  Everything derives from SheetsError so a
caller can catch the lot in one place.
"""

class SheetsError(Exception):
    """Base for all sheetwriter errors"""
    pass

class AuthenticationError(SheetsError):
    """
    Credentials were malformed, missing or rejected by Google.
    """
    pass

class TranslationError(SheetsError, ValueError):
    """
    A python value could not be turned into a cell, e.g. a date looking
    string that doesn't actually parse as a date.
    """
    pass

class RequestError(SheetsError):
    """
    The remote call failed.  The message is the one from the underlying
    client and status is the HTTP status if there was one.
    """
    def __init__(self, message: str, status: int|None = None) -> None:
        super().__init__(message)
        self.status = status
