"""Client-side shape checks run before anything is sent to the API.

Looser than the server: the phone only has to be non-empty here, the server
enforces the digit count.
"""

from invitees.domain import EMAIL_PATTERN


def first_field_error(name: str, email: str, phone: str) -> tuple[str, str] | None:
    """Return (field, message_id) for the first failing field, or None."""
    if not (name or "").strip():
        return "name", "name_required"
    if not (email or "").strip():
        return "email", "email_required"
    if not EMAIL_PATTERN.fullmatch(email):
        return "email", "email_invalid"
    if not (phone or "").strip():
        return "phone", "phone_required"
    return None
