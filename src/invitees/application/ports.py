"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol


class BackendError(Exception):
    """The spreadsheet store was unreachable, refused the call, or answered with something unusable."""


class SheetStore(Protocol):
    """Remote range store. Ranges use A1 notation, e.g. "Invitees!C:D"."""

    @property
    def spreadsheet_url(self) -> str:
        """Link where people can view the sheet."""
        ...

    def read_range(self, a1_range: str) -> list[list[str]]:
        """Return populated rows of the range in order. Raises BackendError."""
        ...

    def append_rows(self, a1_range: str, rows: list[list[str]]) -> None:
        """Add rows after the last populated row of the range. Raises BackendError."""
        ...

    def update_range(self, a1_range: str, rows: list[list[str]]) -> None:
        """Overwrite the fixed range with rows. Raises BackendError."""
        ...
