"""Application layer: use cases, ports, and DTOs. Depends only on domain."""

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
from invitees.application.registration_service import (
    DEFAULT_SHEET_NAME,
    RegistrationService,
    validate,
)

__all__ = [
    "DEFAULT_SHEET_NAME",
    "FIELD_EMAIL",
    "FIELD_NAME",
    "FIELD_PHONE",
    "BackendError",
    "ContactCount",
    "ContactCreated",
    "ContactData",
    "Duplicate",
    "DuplicateCheck",
    "Invalid",
    "RegistrationService",
    "SheetStore",
    "validate",
]
