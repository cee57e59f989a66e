"""Domain layer: the Contact entity, normalization and sheet layout. No outer dependencies."""

from invitees.domain.entities import (
    EMAIL_PATTERN,
    HEADER_LABELS,
    MIN_PHONE_LENGTH,
    Contact,
    normalize_email,
    normalize_phone,
)

__all__ = [
    "EMAIL_PATTERN",
    "HEADER_LABELS",
    "MIN_PHONE_LENGTH",
    "Contact",
    "normalize_email",
    "normalize_phone",
]
