"""
Invitees core: clean-architecture layout.

- domain: Contact entity, normalization rules, sheet header labels.
- application: RegistrationService (validate, dedupe, append, count), SheetStore port, DTOs.
- infrastructure: adapters (InMemorySheetStore, GoogleSheetStore).
"""

from invitees.application import (
    BackendError,
    ContactCount,
    ContactCreated,
    ContactData,
    Duplicate,
    DuplicateCheck,
    Invalid,
    RegistrationService,
    SheetStore,
)
from invitees.domain import Contact
from invitees.infrastructure import GoogleSheetStore, InMemorySheetStore

__all__ = [
    "BackendError",
    "Contact",
    "ContactCount",
    "ContactCreated",
    "ContactData",
    "Duplicate",
    "DuplicateCheck",
    "GoogleSheetStore",
    "InMemorySheetStore",
    "Invalid",
    "RegistrationService",
    "SheetStore",
]
