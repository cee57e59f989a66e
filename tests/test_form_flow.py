"""Tests for the form YAML loader, the XState machine, and the form flow adapter."""

from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from api.main import app, get_service
from form.api_client import ApiResponse, RegistrationApiClient
from form.flow_adapter import (
    ClearForm,
    FieldError,
    FocusField,
    OpenUrl,
    SetBusy,
    ShowCount,
    ShowMessage,
    event_to_xstate,
    run_form_flow,
)
from form.flow_loader import get_flow_path, load_flow
from form.validation import first_field_error
from form.xstate_machine import load_machine, transition
from invitees.application import RegistrationService
from invitees.infrastructure import InMemorySheetStore

VALID = {"name": "John Doe", "email": "john@example.com", "phone": "080-123-4567"}


class StubApi:
    """Answers create_contact with a fixed response and records calls."""

    def __init__(self, response: ApiResponse | None = None, count: int | None = 7, url: str | None = None):
        self.response = response or ApiResponse(201, {"success": True})
        self.count_value = count
        self.url = url
        self.created: list[tuple] = []
        self.count_calls = 0

    def create_contact(self, name, email, phone):
        self.created.append((name, email, phone))
        return self.response

    def count(self):
        self.count_calls += 1
        return self.count_value

    def sheet_url(self):
        return self.url


def _submit(api, payload=None):
    return run_form_flow("idle", {"type": "submit", "payload": payload or dict(VALID)}, api)


def _of(actions, kind):
    return [a for a in actions if isinstance(a, kind)]


# --- loader and machine ---


def test_load_flow():
    path = get_flow_path()
    assert path.name == "form.yaml"
    flow = load_flow(path)
    assert [f["id"] for f in flow["fields"]] == ["name", "email", "phone"]
    assert "success" in flow["messages"]


def test_load_flow_requires_fields(tmp_path):
    (tmp_path / "form.yaml").write_text("fields:\n  - id: name\n    label: Name\n")
    with pytest.raises(ValueError, match="must define field 'email'"):
        load_flow(tmp_path / "form.yaml")


def test_load_machine_rejects_unknown_initial(tmp_path):
    (tmp_path / "m.json").write_text('{"id": "m", "initial": "nowhere", "states": {"idle": {}}}')
    with pytest.raises(ValueError, match="initial state"):
        load_machine(tmp_path / "m.json")


def test_xstate_machine_transition():
    machine = load_machine()
    assert machine["initial"] == "idle"
    assert transition(machine, "idle", "SUBMIT") == "validating"
    assert transition(machine, "validating", "INVALID") == "idle"
    assert transition(machine, "validating", "VALID") == "submitting"
    assert transition(machine, "submitting", "DUPLICATE") == "settled_duplicate"
    assert transition(machine, "settled_duplicate", "DONE") == "idle"


@pytest.mark.parametrize("target", ["a", "b"])
def test_transition_follows_each_config(target):
    config = {"id": "m", "initial": "idle", "states": {"idle": {"on": {"GO": target}}, "a": {}, "b": {}}}
    assert transition(config, "idle", "GO") == target


def test_transition_reloaded_machine_file(tmp_path):
    path = tmp_path / "m.json"
    for target in ("a", "b"):
        path.write_text(
            '{"id": "m", "initial": "idle", "states": {"idle": {"on": {"GO": "%s"}}, "a": {}, "b": {}}}' % target
        )
        assert transition(load_machine(path), "idle", "GO") == target


def test_event_to_xstate():
    assert event_to_xstate({"type": "submit"}) == "SUBMIT"
    assert event_to_xstate({"type": "refresh_count"}) == "REFRESH_COUNT"
    assert event_to_xstate({"type": "open_list"}) == "OPEN_LIST"
    assert event_to_xstate({"type": "unknown"}) is None


# --- client-side validation ---


@pytest.mark.parametrize(
    "name, email, phone, expected",
    [
        ("", "a@b.co", "1", ("name", "name_required")),
        ("Ann", " ", "1", ("email", "email_required")),
        ("Ann", "ann@b", "1", ("email", "email_invalid")),
        ("Ann", "a@b.co\n", "1", ("email", "email_invalid")),
        ("Ann", "a@b.co", "", ("phone", "phone_required")),
        ("Ann", "a@b.co", "1", None),
    ],
)
def test_first_field_error(name, email, phone, expected):
    assert first_field_error(name, email, phone) == expected


# --- flow ---


def test_invalid_input_stays_idle_without_calling_api():
    api = StubApi()
    actions, state, visited = _submit(api, {"name": "Ann", "email": "not-an-email", "phone": "1"})
    assert state == "idle"
    assert visited == ["validating", "idle"]
    assert api.created == []
    errors = _of(actions, FieldError)
    assert errors[0].field == "email"
    assert errors[0].text == "Please enter a valid email address"
    assert _of(actions, FocusField)[0].field == "email"


def test_success_clears_form_focuses_name_and_refreshes_count():
    api = StubApi(ApiResponse(201, {"success": True, "message": "Contact saved successfully"}), count=12)
    actions, state, visited = _submit(api)
    assert state == "idle"
    assert visited == ["validating", "submitting", "settled_success", "idle"]
    assert api.created == [("John Doe", "john@example.com", "080-123-4567")]
    assert _of(actions, ClearForm)
    assert _of(actions, FocusField)[-1].field == "name"
    assert api.count_calls == 1
    assert _of(actions, ShowCount)[0].count == 12
    success = [m for m in _of(actions, ShowMessage) if m.level == "success"]
    assert success[0].text == "Welcome John Doe!"


def test_submit_control_is_disabled_while_submitting():
    actions, _, _ = _submit(StubApi())
    busy = [a.busy for a in _of(actions, SetBusy)]
    assert busy == [True, False]


def test_duplicate_shows_colliding_field():
    body = {
        "success": False,
        "message": "This phone number is already registered",
        "duplicate": True,
        "field": "phone",
    }
    api = StubApi(ApiResponse(409, body))
    actions, state, visited = _submit(api)
    assert state == "idle"
    assert "settled_duplicate" in visited
    assert _of(actions, FieldError) == [FieldError(field="phone", text=body["message"])]
    assert not _of(actions, ClearForm)
    assert api.count_calls == 0


def test_409_without_duplicate_flag_is_an_error():
    _, _, visited = _submit(StubApi(ApiResponse(409, {"success": False, "message": "conflict"})))
    assert "settled_error" in visited


def test_server_error_shows_server_message():
    api = StubApi(ApiResponse(500, {"success": False, "message": "Failed to add contact: quota"}))
    actions, state, visited = _submit(api)
    assert state == "idle"
    assert "settled_error" in visited
    errors = [m for m in _of(actions, ShowMessage) if m.level == "error"]
    assert errors[0].text == "Failed to add contact: quota"


def test_network_failure_shows_connection_message():
    actions, state, visited = _submit(StubApi(ApiResponse(None)))
    assert state == "idle"
    assert "settled_error" in visited
    errors = [m for m in _of(actions, ShowMessage) if m.level == "error"]
    assert errors[0].text.startswith("Unable to connect")


def test_2xx_without_success_flag_is_an_error():
    _, _, visited = _submit(StubApi(ApiResponse(200, {"success": False})))
    assert "settled_error" in visited


def test_refresh_count():
    actions, state, _ = run_form_flow("idle", {"type": "refresh_count"}, StubApi(count=3))
    assert state == "idle"
    assert _of(actions, ShowCount) == [ShowCount(count=3, text="3 registered so far")]


def test_refresh_count_unavailable():
    actions, _, _ = run_form_flow("idle", {"type": "refresh_count"}, StubApi(count=None))
    assert _of(actions, ShowCount)[0].count is None


def test_open_list():
    url = "https://docs.google.com/spreadsheets/d/abc"
    actions, state, _ = run_form_flow("idle", {"type": "open_list"}, StubApi(url=url))
    assert state == "idle"
    assert _of(actions, OpenUrl) == [OpenUrl(url=url)]


def test_open_list_failure():
    actions, state, _ = run_form_flow("idle", {"type": "open_list"}, StubApi(url=None))
    assert state == "idle"
    assert _of(actions, ShowMessage)[0].text == "Could not retrieve sheet URL"


# --- against the real API ---


@pytest.fixture
def live_api():
    service = RegistrationService(InMemorySheetStore(), clock=lambda: datetime(2026, 1, 11, 9, 0, 0))
    service.ensure_headers()
    app.dependency_overrides[get_service] = lambda: service
    yield RegistrationApiClient(client=TestClient(app))
    app.dependency_overrides.clear()


def test_register_then_duplicate_through_api(live_api):
    actions, _, visited = _submit(live_api)
    assert "settled_success" in visited
    assert _of(actions, ShowCount)[0].count == 1

    dup = {"name": "Jane", "email": "JOHN@example.com", "phone": "0809999999"}
    actions, _, visited = _submit(live_api, dup)
    assert "settled_duplicate" in visited
    assert _of(actions, FieldError)[0].field == "email"


def test_api_client_transport_error_returns_empty_response():
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    client = RegistrationApiClient(client=httpx.Client(transport=httpx.MockTransport(refuse), base_url="http://api"))
    assert client.create_contact("a", "b", "c") == ApiResponse(status_code=None)
    assert client.count() is None
    assert client.sheet_url() is None
