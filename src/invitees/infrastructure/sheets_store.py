"""Google Sheets (API v4) implementation of SheetStore.

Every remote failure (HTTP error from the API, auth failure, transport error,
unexpected payload) is raised as BackendError so the application layer can
apply its fallback policies without knowing about googleapiclient.
"""

import logging
import os

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from invitees.application.ports import BackendError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"
VALUE_INPUT_OPTION = "RAW"

_REMOTE_ERRORS = (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


def spreadsheet_url(spreadsheet_id: str) -> str:
    return f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}"


class GoogleSheetStore:
    """Reads and writes cell values of one spreadsheet through spreadsheets.values."""

    def __init__(self, service: object, spreadsheet_id: str) -> None:
        self._values = service.spreadsheets().values()
        self._spreadsheet_id = spreadsheet_id

    @property
    def spreadsheet_url(self) -> str:
        return spreadsheet_url(self._spreadsheet_id)

    def read_range(self, a1_range: str) -> list[list[str]]:
        try:
            response = self._values.get(
                spreadsheetId=self._spreadsheet_id,
                range=a1_range,
            ).execute()
        except _REMOTE_ERRORS as e:
            raise BackendError(f"Reading {a1_range} failed: {e}") from e
        if not isinstance(response, dict):
            raise BackendError(f"Reading {a1_range} returned a malformed response")
        values = response.get("values") or []
        if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
            raise BackendError(f"Reading {a1_range} returned malformed values")
        return [[str(cell) for cell in row] for row in values]

    def append_rows(self, a1_range: str, rows: list[list[str]]) -> None:
        try:
            self._values.append(
                spreadsheetId=self._spreadsheet_id,
                range=a1_range,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": rows},
            ).execute()
        except _REMOTE_ERRORS as e:
            raise BackendError(f"Appending to {a1_range} failed: {e}") from e

    def update_range(self, a1_range: str, rows: list[list[str]]) -> None:
        try:
            self._values.update(
                spreadsheetId=self._spreadsheet_id,
                range=a1_range,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": rows},
            ).execute()
        except _REMOTE_ERRORS as e:
            raise BackendError(f"Updating {a1_range} failed: {e}") from e


def _build_sheets_service():
    """Build a Sheets v4 client from env: service account first, then API key."""
    email = os.environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL", "").strip()
    private_key = os.environ.get("GOOGLE_PRIVATE_KEY", "").strip()
    api_key = os.environ.get("GOOGLE_API_KEY", "").strip()

    if email and private_key:
        try:
            credentials = service_account.Credentials.from_service_account_info(
                {
                    "client_email": email,
                    "private_key": private_key.replace("\\n", "\n"),
                    "token_uri": TOKEN_URI,
                },
                scopes=SCOPES,
            )
        except (ValueError, GoogleAuthError) as e:
            raise BackendError(f"Unusable service account credentials: {e}") from e
        logger.info("Google Sheets API initialized with service account")
        return build("sheets", "v4", credentials=credentials, cache_discovery=False)

    if api_key:
        # API keys can only read public sheets; writes will fail with 401/403.
        logger.info("Google Sheets API initialized with API key")
        return build("sheets", "v4", developerKey=api_key, cache_discovery=False)

    raise BackendError(
        "No Google Sheets credentials found. Set GOOGLE_SERVICE_ACCOUNT_EMAIL and "
        "GOOGLE_PRIVATE_KEY (or GOOGLE_API_KEY) in .env."
    )


def build_sheet_store():
    """Return the store selected by SHEET_BACKEND ("google" or "memory").

    Raises BackendError when the Google store cannot be configured.
    """
    backend = os.environ.get("SHEET_BACKEND", "google").strip().lower() or "google"
    if backend == "memory":
        from invitees.infrastructure.memory_store import InMemorySheetStore

        logger.warning("SHEET_BACKEND=memory: registrations are kept in process memory only")
        return InMemorySheetStore()
    if backend != "google":
        raise BackendError(f"Unknown SHEET_BACKEND {backend!r}; use 'google' or 'memory'")

    spreadsheet_id = os.environ.get("GOOGLE_SPREADSHEET_ID", "").strip()
    if not spreadsheet_id:
        raise BackendError("GOOGLE_SPREADSHEET_ID not set in environment variables")
    return GoogleSheetStore(_build_sheets_service(), spreadsheet_id)
