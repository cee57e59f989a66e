#!/usr/bin/env python3
"""One-off setup: write the header row to the registration sheet and report
the current count.

Uses the same store the API would (SHEET_BACKEND, GOOGLE_SPREADSHEET_ID and
credentials from .env). Idempotent: an existing header row is left as is.
Run from repo root: python scripts/init_sheet.py
"""
import logging
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv  # noqa: E402

from invitees.application import (  # noqa: E402
    DEFAULT_SHEET_NAME,
    BackendError,
    RegistrationService,
)
from invitees.infrastructure import build_sheet_store  # noqa: E402

load_dotenv(REPO_ROOT / ".env")

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)


def main() -> int:
    sheet_name = os.environ.get("SHEET_NAME", DEFAULT_SHEET_NAME).strip() or DEFAULT_SHEET_NAME
    try:
        store = build_sheet_store()
    except BackendError as e:
        print(f"Cannot reach the sheet: {e}", file=sys.stderr)
        return 1

    service = RegistrationService(store, sheet_name=sheet_name)
    service.ensure_headers()
    result = service.count()
    if not result.available:
        print("Headers checked, but the sheet could not be read back.", file=sys.stderr)
        return 1
    print(f"Sheet '{sheet_name}' ready at {service.sheet_url()}")
    print(f"{result.count} registration(s) so far.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
