"""Contact registration: validate, dedupe, append. Count and header setup."""

import logging
from collections.abc import Callable
from datetime import datetime

from invitees.application.dto import (
    FIELD_EMAIL,
    FIELD_NAME,
    FIELD_PHONE,
    ContactCount,
    ContactCreated,
    ContactData,
    Duplicate,
    DuplicateCheck,
    Invalid,
)
from invitees.application.ports import BackendError, SheetStore
from invitees.domain import (
    EMAIL_PATTERN,
    HEADER_LABELS,
    MIN_PHONE_LENGTH,
    Contact,
    normalize_email,
    normalize_phone,
)

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Invitees"

# e.g. "01/11/2026, 10:30:00 AM"
TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


class RegistrationService:
    """
    Core flow: validate -> scan store for email/phone -> append row.

    The check and the append are separate remote calls with no lock between
    them, so two concurrent registrations of the same email or phone can both
    be stored.
    """

    def __init__(
        self,
        store: SheetStore,
        *,
        sheet_name: str = DEFAULT_SHEET_NAME,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._sheet = sheet_name
        self._clock = clock

    def _range(self, cells: str) -> str:
        return f"{self._sheet}!{cells}"

    def create(self, data: ContactData) -> ContactCreated | Duplicate | Invalid:
        """Register a contact. Raises BackendError if the append fails."""
        invalid = validate(data)
        if invalid is not None:
            return invalid

        name = data.name.strip()
        email = normalize_email(data.email)
        phone = normalize_phone(data.phone)

        check = self.check_duplicate(email, phone)
        if check.is_duplicate:
            return Duplicate(field=check.field)

        now = self._clock()
        contact = Contact(
            id=str(int(now.timestamp() * 1000)),
            name=name,
            email=email,
            phone=phone,
            created_at=now.strftime(TIMESTAMP_FORMAT),
        )
        try:
            self._store.append_rows(self._range("A:E"), [contact.to_row()])
        except BackendError as e:
            logger.error("Error adding contact to sheet: %s", e)
            raise BackendError(f"Failed to add contact: {e}") from e
        logger.info("Contact added: %s (%s, %s)", contact.name, email, phone)
        return ContactCreated(contact=contact)

    def check_duplicate(self, email: str, phone: str) -> DuplicateCheck:
        """Scan rows in insertion order; first row matching email or phone wins.

        Both arguments must already be normalized. A failed read yields
        DuplicateCheck(checked=False), which callers treat as no duplicate.
        """
        try:
            rows = self._store.read_range(self._range("C:D"))
        except BackendError as e:
            logger.warning("Duplicate check skipped, store unreadable: %s", e)
            return DuplicateCheck(checked=False)

        for row in rows[1:]:
            existing_email = row[0] if len(row) > 0 else ""
            existing_phone = row[1] if len(row) > 1 else ""
            if existing_email and normalize_email(existing_email) == email:
                return DuplicateCheck(field=FIELD_EMAIL)
            if existing_phone and normalize_phone(existing_phone) == phone:
                return DuplicateCheck(field=FIELD_PHONE)
        return DuplicateCheck()

    def count(self) -> ContactCount:
        """Data rows in the sheet, excluding the header. Falls back to 0 when unreadable."""
        try:
            rows = self._store.read_range(self._range("A:A"))
        except BackendError as e:
            logger.warning("Contact count unavailable: %s", e)
            return ContactCount(count=0, available=False)
        if len(rows) <= 1:
            return ContactCount(count=0)
        return ContactCount(count=len(rows) - 1)

    def ensure_headers(self) -> None:
        """Write the header row if row 1 is empty. Never raises on backend errors."""
        header_range = self._range("A1:E1")
        try:
            rows = self._store.read_range(header_range)
            first = rows[0] if rows else []
            if first == HEADER_LABELS:
                logger.info("Spreadsheet headers already exist")
                return
            if any(cell.strip() for cell in first):
                logger.warning(
                    "Row 1 of %s holds %r, not the expected headers; leaving it unchanged",
                    self._sheet,
                    first,
                )
                return
            self._store.update_range(header_range, [list(HEADER_LABELS)])
            logger.info("Spreadsheet initialized with headers")
        except BackendError as e:
            logger.error("Error initializing spreadsheet headers: %s", e)

    def sheet_url(self) -> str:
        return self._store.spreadsheet_url


def validate(data: ContactData) -> Invalid | None:
    """Apply the shape rules in order; return the first failure or None."""
    name = (data.name or "").strip()
    if not name:
        return Invalid(field=FIELD_NAME, reason="Name is required")

    email = data.email or ""
    if not email.strip():
        return Invalid(field=FIELD_EMAIL, reason="Email address is required")
    if not EMAIL_PATTERN.fullmatch(email):
        return Invalid(field=FIELD_EMAIL, reason="Invalid email address")

    phone = data.phone or ""
    if not phone.strip():
        return Invalid(field=FIELD_PHONE, reason="Phone number is required")
    if len(normalize_phone(phone)) < MIN_PHONE_LENGTH:
        return Invalid(
            field=FIELD_PHONE,
            reason=f"Phone number must be at least {MIN_PHONE_LENGTH} digits",
        )
    return None
