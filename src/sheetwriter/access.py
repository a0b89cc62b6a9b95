from collections.abc import Iterable, Mapping
from pathlib import Path
import json
import logging
import threading

import google.auth
import google.auth.exceptions
from google.auth.credentials import Credentials, Scoped
from google.oauth2 import service_account
from googleapiclient.discovery import build, Resource

from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

class GoogleSheetsSession():
    """
    Authenticated access to the Sheets API using a service account.
    See https://developers.google.com/workspace/guides/create-credentials#service-account
    for how to get a key file.  Remember the spreadsheet has to be shared with the
    service account's client_email for it to be able to edit it.

    Credentials can be given as the parsed key file dict, a path to the key file
    or an already built google.auth Credentials object.  If nothing is given the
    default key file location is tried and failing that google.auth.default(),
    which looks at GOOGLE_APPLICATION_CREDENTIALS and the other cloud default locations.

    This is a plain object rather than a module singleton so several sessions
    (e.g. different service accounts) can live side by side.  Credentials are
    only checked for shape here, the token itself is fetched by the client on
    the first request.

    The built service object holds an httplib2.Http which is not thread safe,
    so each thread using the session gets its own service.
    See https://googleapis.github.io/google-api-python-client/docs/thread_safety.html
    """

    __SCOPES = {
        "sheets": "https://www.googleapis.com/auth/spreadsheets",
        "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
        "drive-file": "https://www.googleapis.com/auth/drive.file",
        "drive": "https://www.googleapis.com/auth/drive",
    }
    __SCOPE_URL_PREFIX = "https://www.googleapis.com/"

    __DEFAULT_CREDENTIALS = str((Path.home() / "gws_service_account.json").absolute())
    __DEFAULT_SCOPES = ["sheets"]

    def __init__(self, credentials: Mapping|Path|str|Credentials|None = None,
                 scopes: Iterable[str]|str|None = None,
                 num_retries: int = 0) -> None:
        scope_list = self._scope_list(scopes if scopes is not None else self.__DEFAULT_SCOPES)
        self.__creds, self.__credentials_file = self._load_credentials(credentials, scope_list,
                                                                       Path(self.__DEFAULT_CREDENTIALS))
        self.__source = credentials
        self.__scopes = scope_list
        self.num_retries = num_retries
        self.__local = threading.local()

    def __bool__(self) -> bool:
        """True if we hold credentials"""
        return self.__creds is not None

    def __str__(self) -> str:
        return f"{self.account or '<default>'}:{str(self.__scopes)}"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @classmethod
    def get_scope(cls, scope: str) -> str:
        """
        Get a scope based on simplified label.
        A raw URL will also be expected.
        """
        s = str(scope)
        sc = cls.__SCOPES.get(s, "")
        if not sc and s.startswith(cls.__SCOPE_URL_PREFIX):
            sc = s
        return sc

    @classmethod
    def _scope_list(cls, value: Iterable[str]|str) -> list[str]:
        values = [value] if isinstance(value, str) else list(value)
        slist = []
        for v in values:
            s = cls.get_scope(v)
            if not s:
                raise ValueError(f"Unknown scope: {v}")
            if s not in slist:
                slist.append(s)
        return slist

    @staticmethod
    def _load_credentials(credentials: Mapping|Path|str|Credentials|None,
                          scopes: list[str],
                          credentials_file: Path) -> tuple[Credentials, Path]:
        """
        Build service account credentials from whatever we were handed.
        Returns the credentials and the key file path they came (or would come) from.
        Malformed key data is an AuthenticationError.
        """
        if isinstance(credentials, Credentials):
            return credentials, credentials_file
        try:
            if isinstance(credentials, Mapping):
                return (service_account.Credentials.from_service_account_info(dict(credentials), scopes=scopes),
                        credentials_file)
            if credentials is not None:
                credentials_file = Path(credentials)
            if credentials_file.is_file():
                return (service_account.Credentials.from_service_account_file(str(credentials_file), scopes=scopes),
                        credentials_file)
            if credentials is not None:
                raise AuthenticationError(f"Service account file not found: {credentials_file}")
            # final hail mary
            creds, _ = google.auth.default(scopes=scopes)
            return creds, credentials_file
        except (ValueError, KeyError, json.JSONDecodeError) as e:
            raise AuthenticationError(f"Invalid service account credentials: {e}") from e
        except google.auth.exceptions.GoogleAuthError as e:
            raise AuthenticationError(str(e)) from e

    @property
    def creds(self) -> Credentials:
        return self.__creds

    @property
    def account(self) -> str:
        """The service account email, empty if the credentials don't have one"""
        return getattr(self.__creds, "service_account_email", "") or ""

    @property
    def scopes(self) -> list[str]:
        return list(self.__scopes)

    @property
    def credentials_file(self) -> Path:
        """
        Path to the service account key file, if that is where the credentials came from
        or will come from.
        """
        return self.__credentials_file

    @property
    def config(self) -> dict:
        """
        Get all configuration state as a dict.
        Convenience for getting it all at once for pushing into a json, toml, ini, etc, file.
        """
        return {
            'credentials': str(self.__credentials_file),
            'scopes': self.scopes,
            'num_retries': self.num_retries
        }

    @config.setter
    def config(self, config: dict) -> None:
        """
        Set configuration state from a dict.
        Changing the credentials file or scopes reloads the credentials.  Nothing
        changes if the reload fails.
        A session built from a Credentials object can only take new scopes if
        those credentials support with_scopes().
        """
        num_retries = self.num_retries
        scopes = self.__scopes
        source = self.__source
        v = config.get('num_retries', None)
        if v is not None:
            num_retries = int(v)
        v = config.get('scopes', None)
        if v:
            scopes = self._scope_list(v)
        v = config.get('credentials', None)
        if v is not None:
            source = Path(v)

        creds, credentials_file = self.__creds, self.__credentials_file
        if source is not self.__source or scopes != self.__scopes:
            if isinstance(source, Credentials):
                if not isinstance(source, Scoped):
                    raise ValueError(f"{type(source).__name__} credentials cannot be given new scopes")
                creds = source.with_scopes(scopes)
            else:
                creds, credentials_file = self._load_credentials(source, scopes, self.__credentials_file)
            self.__local = threading.local()

        self.__creds = creds
        self.__credentials_file = credentials_file
        self.__source = source
        self.__scopes = scopes
        self.num_retries = num_retries

    def get_service(self) -> Resource:
        """
        Build the sheets service for the calling thread if not already available.
        """
        service = getattr(self.__local, "service", None)
        if service is None:
            logger.info("building sheets v4 service for %s", self.account or "default credentials")
            service = build("sheets", "v4", credentials=self.__creds, cache_discovery=False)
            self.__local.service = service
        return service
