"""Input DTO and result types for the registration flow."""

from dataclasses import dataclass

from invitees.domain import Contact

FIELD_NAME = "name"
FIELD_EMAIL = "email"
FIELD_PHONE = "phone"


@dataclass(frozen=True)
class ContactData:
    """Raw form input. Fields may be missing or untrimmed."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None


# --- create results ---


@dataclass(frozen=True)
class ContactCreated:
    """Contact passed validation and the duplicate check and was appended."""

    contact: Contact


@dataclass(frozen=True)
class Duplicate:
    """An existing row has the same normalized email or phone."""

    field: str

    @property
    def message(self) -> str:
        if self.field == FIELD_EMAIL:
            return "This email address is already registered"
        return "This phone number is already registered"


@dataclass(frozen=True)
class Invalid:
    """Input failed a shape rule. field names the offending input."""

    field: str
    reason: str


# --- degraded reads ---


@dataclass(frozen=True)
class DuplicateCheck:
    """
    Outcome of the duplicate scan.
    checked=False means the store could not be read; the scan is then treated
    as finding nothing so registration stays available.
    """

    field: str | None = None
    checked: bool = True

    @property
    def is_duplicate(self) -> bool:
        return self.field is not None


@dataclass(frozen=True)
class ContactCount:
    """Number of data rows. available=False means count fell back to 0."""

    count: int
    available: bool = True
