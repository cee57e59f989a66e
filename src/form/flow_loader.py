"""Load and validate the YAML form definition (field labels and messages)."""

import os
from pathlib import Path

import yaml

REQUIRED_FIELDS = ("name", "email", "phone")


def _repo_root() -> Path:
    """Return repo root (parent of src)."""
    return Path(__file__).resolve().parent.parent.parent


def get_flow_path() -> Path:
    """Return path to the form YAML (FORM_FLOW_PATH env or flows/form.yaml)."""
    path = os.environ.get("FORM_FLOW_PATH", "").strip()
    if path:
        return Path(path).resolve()
    return _repo_root() / "flows" / "form.yaml"


def load_flow(path: Path | None = None) -> dict:
    """Load form YAML and return it as a dict. Validates minimal structure."""
    if path is None:
        path = get_flow_path()
    flow = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(flow, dict):
        raise ValueError("Form YAML must be a dict")
    fields = flow.get("fields") or []
    field_ids = [f.get("id") for f in fields if isinstance(f, dict)]
    for required in REQUIRED_FIELDS:
        if required not in field_ids:
            raise ValueError(f"Form must define field '{required}'")
    for field in fields:
        if isinstance(field, dict) and not field.get("label"):
            field["label"] = field["id"]
    messages = flow.get("messages")
    if messages is None:
        flow["messages"] = {}
    elif not isinstance(messages, dict):
        raise ValueError("'messages' must be a mapping")
    return flow


_flow_cache: dict | None = None


def get_flow(cache: bool = True) -> dict:
    """Load flow (cached by default). Pass cache=False to reload."""
    global _flow_cache
    if cache and _flow_cache is not None:
        return _flow_cache
    _flow_cache = load_flow()
    return _flow_cache
