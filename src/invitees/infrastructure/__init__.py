"""Infrastructure layer: concrete implementations of application ports."""

from invitees.infrastructure.memory_store import InMemorySheetStore
from invitees.infrastructure.sheets_store import (
    GoogleSheetStore,
    build_sheet_store,
    spreadsheet_url,
)

__all__ = [
    "GoogleSheetStore",
    "InMemorySheetStore",
    "build_sheet_store",
    "spreadsheet_url",
]
