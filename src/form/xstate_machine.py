"""
Form state machine on xstate-python.

Loads standard XState JSON (id, initial, states with on: { EVENT: target }),
so the same definition opens in Stately Studio or JS XState.
"""

import json
import os
from pathlib import Path

from xstate.machine import Machine


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent.parent


def get_machine_path() -> Path:
    """Return FORM_MACHINE_PATH or flows/form_machine.json."""
    path = os.environ.get("FORM_MACHINE_PATH", "").strip()
    if path:
        return Path(path).resolve()
    return _repo_root() / "flows" / "form_machine.json"


def load_machine(path: Path | None = None) -> dict:
    if path is None:
        path = get_machine_path()
    config = json.loads(path.read_text(encoding="utf-8"))
    if "initial" not in config or "states" not in config:
        raise ValueError("Machine must have 'initial' and 'states'")
    if config["initial"] not in config["states"]:
        raise ValueError(f"initial state '{config['initial']}' is not defined")
    return config


_instances: dict[str, Machine] = {}


def _machine_instance(config: dict) -> Machine:
    """Return a Machine for this config. Cached by the config's content."""
    key = json.dumps(config, sort_keys=True)
    if key not in _instances:
        _instances[key] = Machine(config)
    return _instances[key]


def transition(machine: dict, state_value: str, event: str) -> str | None:
    """Return next state value for (state_value, event), or None if the event is not handled."""
    try:
        instance = _machine_instance(machine)
        state = instance.state_from(state_value)
        next_state = instance.transition(state, event)
        if next_state.value == state_value:
            return None
        return next_state.value
    except (ValueError, KeyError):
        return None


_machine_cache: dict | None = None


def get_machine(cache: bool = True) -> dict:
    global _machine_cache
    if cache and _machine_cache is not None:
        return _machine_cache
    _machine_cache = load_machine()
    return _machine_cache
