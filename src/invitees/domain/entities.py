"""Domain entities: Contact, plus the normalization rules used for deduplication."""

import re
from dataclasses import dataclass

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_LENGTH = 10

# Whitespace, dashes and parentheses.
_PHONE_SEPARATORS = re.compile(r"[\s\-()]")

# Row 1 of the sheet; column order matches Contact.to_row().
HEADER_LABELS = ["ID", "Name", "Email", "Phone Number", "Date & Time"]


def normalize_email(raw: str) -> str:
    return (raw or "").strip().lower()


def normalize_phone(raw: str) -> str:
    """Strip separators only. No country code handling."""
    return _PHONE_SEPARATORS.sub("", raw or "")


@dataclass(frozen=True)
class Contact:
    """
    One registrant as stored in a sheet row.
    A Contact is immutable once written; there is no update or delete.
    """

    id: str
    name: str
    email: str
    phone: str
    created_at: str

    def __post_init__(self):
        if not self.id:
            raise ValueError("Contact id must be non-empty.")
        if not self.name or not self.name.strip():
            raise ValueError("Contact name must be non-empty.")

    def to_row(self) -> list[str]:
        return [self.id, self.name, self.email, self.phone, self.created_at]

    def to_dict(self) -> dict[str, str]:
        """Public shape, as returned by the HTTP API."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "timestamp": self.created_at,
        }
