"""
Adapter: map form events to XState events and states to effects.

The machine (xstate_machine) only knows state names; everything the form
does on screen and every API call lives here. A step runs effects until the
machine is back in a waiting state, so a submission always ends in idle.
"""

from dataclasses import dataclass
from typing import Any

from form.flow_loader import get_flow
from form.validation import first_field_error
from form.xstate_machine import get_machine, transition


@dataclass
class ShowMessage:
    text: str
    level: str = "info"


@dataclass
class FieldError:
    field: str
    text: str


@dataclass
class FocusField:
    field: str


@dataclass
class ClearForm:
    pass


@dataclass
class SetBusy:
    """Disable (busy=True) or re-enable the submit control."""

    busy: bool


@dataclass
class ShowCount:
    count: int | None
    text: str


@dataclass
class OpenUrl:
    url: str


WAITING_STATES = frozenset({"idle"})

SETTLED_STATES = frozenset({"settled_success", "settled_duplicate", "settled_error"})


def event_to_xstate(event: dict) -> str | None:
    """Map a form event (type) to the XState event string."""
    return {
        "submit": "SUBMIT",
        "refresh_count": "REFRESH_COUNT",
        "open_list": "OPEN_LIST",
    }.get(event.get("type"))


def _format_message(messages: dict, message_id: str, template_vars: dict) -> str:
    text = messages.get(message_id) or message_id
    for k, v in template_vars.items():
        text = text.replace("{" + k + "}", str(v) if v is not None else "")
    return text


def _count_actions(api: Any, messages: dict) -> list:
    count = api.count()
    if count is None:
        return [ShowCount(count=None, text=_format_message(messages, "count_unavailable", {}))]
    return [ShowCount(count=count, text=_format_message(messages, "count", {"count": count}))]


def _run_effect(
    state_value: str,
    event: dict,
    slots: dict,
    api: Any,
    messages: dict,
) -> tuple[list, str | None]:
    """
    Run effect for state_value. Return (actions, outcome_event).
    outcome_event is the XState event to send next (e.g. VALID, SUCCESS, DONE).
    """
    actions: list = []
    payload = event.get("payload") or {}

    if state_value == "validating":
        error = first_field_error(
            payload.get("name") or "",
            payload.get("email") or "",
            payload.get("phone") or "",
        )
        if error:
            field, message_id = error
            actions.append(FieldError(field=field, text=_format_message(messages, message_id, {})))
            actions.append(FocusField(field=field))
            return actions, "INVALID"
        return actions, "VALID"

    if state_value == "submitting":
        actions.append(SetBusy(busy=True))
        actions.append(ShowMessage(text=_format_message(messages, "submitting", {})))
        response = api.create_contact(
            payload.get("name") or "",
            payload.get("email") or "",
            payload.get("phone") or "",
        )
        slots["response"] = response
        body = response.body
        if response.ok and body.get("success"):
            return actions, "SUCCESS"
        if response.status_code == 409 and body.get("duplicate"):
            return actions, "DUPLICATE"
        return actions, "ERROR"

    if state_value == "settled_success":
        name = (payload.get("name") or "").strip()
        actions.append(SetBusy(busy=False))
        actions.append(
            ShowMessage(text=_format_message(messages, "success", {"name": name}), level="success")
        )
        actions.append(ClearForm())
        actions.append(FocusField(field="name"))
        actions.extend(_count_actions(api, messages))
        return actions, "DONE"

    if state_value == "settled_duplicate":
        body = slots["response"].body
        field = body.get("field")
        text = body.get("message") or _format_message(messages, "duplicate_fallback", {})
        actions.append(SetBusy(busy=False))
        if field:
            actions.append(FieldError(field=field, text=text))
        actions.append(ShowMessage(text=text, level="error"))
        return actions, "DONE"

    if state_value == "settled_error":
        response = slots["response"]
        if response.status_code is None:
            text = _format_message(messages, "connection_error", {})
        else:
            text = response.body.get("message") or _format_message(messages, "error_fallback", {})
        actions.append(SetBusy(busy=False))
        actions.append(ShowMessage(text=text, level="error"))
        return actions, "DONE"

    if state_value == "fetching_count":
        return _count_actions(api, messages), "DONE"

    if state_value == "fetching_sheet_url":
        url = api.sheet_url()
        if not url:
            actions.append(
                ShowMessage(text=_format_message(messages, "open_list_failed", {}), level="error")
            )
            return actions, "ERROR"
        actions.append(ShowMessage(text=_format_message(messages, "open_list", {"url": url})))
        actions.append(OpenUrl(url=url))
        return actions, "DONE"

    return actions, None


def run_form_flow(
    state_value: str,
    event: dict,
    api: Any,
    machine: dict | None = None,
    flow: dict | None = None,
) -> tuple[list, str, list[str]]:
    """
    Run one step: transition with event, run effects until we hit a waiting state.
    Returns (actions, new_state_value, visited_states).
    """
    if machine is None:
        machine = get_machine()
    if flow is None:
        flow = get_flow()
    messages = flow.get("messages") or {}
    slots: dict = {}
    all_actions: list = []
    visited: list[str] = []
    current = state_value or machine.get("initial", "idle")
    xevent = event_to_xstate(event)
    max_steps = 20
    steps = 0
    while xevent is not None and steps < max_steps:
        steps += 1
        next_state = transition(machine, current, xevent)
        if next_state is None:
            break
        current = next_state
        visited.append(current)
        if current in WAITING_STATES:
            break
        effect_actions, xevent = _run_effect(current, event, slots, api, messages)
        all_actions.extend(effect_actions)
    return all_actions, current, visited
