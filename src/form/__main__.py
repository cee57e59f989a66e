"""
Terminal registration form: prompts for name, email and phone and submits to the API.
Run: python -m form (from repo root, with API_URL in .env or env vars set).
Commands at the name prompt: "count" refreshes the total, "list" shows the sheet link, "quit" exits.
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Repo root: from src/form/__main__.py go up to repo root (parent.parent.parent when in src layout)
_REPO_ROOT = Path(__file__).resolve().parent.parent.parent
# Load .env from repo root or current dir
for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
    if path.exists():
        load_dotenv(path)
        break

from form.api_client import DEFAULT_API_URL, RegistrationApiClient
from form.flow_adapter import (
    ClearForm,
    FieldError,
    OpenUrl,
    SetBusy,
    ShowCount,
    ShowMessage,
    run_form_flow,
)
from form.flow_loader import get_flow

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.WARNING,
)
logger = logging.getLogger(__name__)

COMMANDS = {"count": "refresh_count", "list": "open_list"}
QUIT = {"quit", "exit", "q"}

_PREFIX = {"success": "[ok] ", "error": "[!] ", "info": ""}


def _render(actions: list) -> None:
    for action in actions:
        if isinstance(action, ShowMessage):
            print(_PREFIX.get(action.level, "") + action.text)
        elif isinstance(action, FieldError):
            print(f"[!] {action.field}: {action.text}")
        elif isinstance(action, ShowCount):
            print(action.text)
        elif isinstance(action, OpenUrl):
            print(action.url)
        elif isinstance(action, (SetBusy, ClearForm)):
            # Prompts are re-issued for every entry; nothing to disable or clear.
            continue


def _prompt_fields(flow: dict) -> dict | None:
    """Read one entry. Returns None to quit, or {"command": ...} for a command."""
    labels = {f["id"]: f["label"] for f in flow.get("fields") or []}
    values: dict[str, str] = {}
    for field_id in ("name", "email", "phone"):
        raw = input(f"{labels.get(field_id, field_id)}: ")
        if field_id == "name":
            word = raw.strip().lower()
            if word in QUIT:
                return None
            if word in COMMANDS:
                return {"command": COMMANDS[word]}
        values[field_id] = raw
    return values


def main() -> None:
    api_url = os.environ.get("API_URL", DEFAULT_API_URL).strip() or DEFAULT_API_URL
    api = RegistrationApiClient(base_url=api_url)
    flow = get_flow()
    state = "idle"
    print(flow.get("title", "Registration"))
    actions, state, _ = run_form_flow(state, {"type": "refresh_count"}, api)
    _render(actions)
    try:
        while True:
            try:
                entry = _prompt_fields(flow)
            except EOFError:
                break
            if entry is None:
                break
            if "command" in entry:
                event = {"type": entry["command"]}
            else:
                event = {"type": "submit", "payload": entry}
            actions, state, _ = run_form_flow(state, event, api)
            _render(actions)
    except KeyboardInterrupt:
        print()
    finally:
        api.close()


if __name__ == "__main__":
    main()
