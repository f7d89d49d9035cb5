"""
Unit tests for bill backends: HTTP transport error normalization, REST provider,
bulk-print endpoint fallback, local JSON provider, token storage and auth.
requests is replaced with a recording fake; no network.
"""
from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from core.exceptions import (
    ApiRequestError,
    NoValidEndpointError,
    NotAuthenticatedError,
    NotFoundError,
)
from core.models import ApiError
from providers.auth import AuthService, FileTokenStorage
from providers.fallback import EndpointFallbackChain, extract_bill_list
from providers.factory import create_bill_api
from providers.http import NO_RESPONSE, HttpTransport
from providers.local_provider import LocalBillProvider
from providers.rest_provider import RestBillProvider
from utils.config import AppConfig

BASE = "http://billing.test/api"


# ---------------------------------------------------------------------------
# Fake requests
# ---------------------------------------------------------------------------


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, body: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._body = body
        if text is None:
            text = "" if body is None else json.dumps(body)
        self.text = text
        self.content = text.encode()

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeRequests:
    """Records calls and answers from a queue (or raises queued exceptions)."""

    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def __call__(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


@pytest.fixture
def tokens(tmp_path) -> FileTokenStorage:
    storage = FileTokenStorage(tmp_path / "session.json")
    storage.save({"name": "Reception", "email": "desk@clinic.test", "token": "tok-123"})
    return storage


def _provider(tokens: FileTokenStorage) -> RestBillProvider:
    return RestBillProvider(BASE, token_storage=tokens, timeout_sec=5)


def _install(monkeypatch: pytest.MonkeyPatch, *responses: FakeResponse | Exception) -> FakeRequests:
    fake = FakeRequests(*responses)
    monkeypatch.setattr("providers.http.requests.request", fake)
    return fake


BILL = {"_id": "b1", "serialNumber": 1, "patientName": "Asha", "amount": 300, "billDate": "2024-01-01"}


# ---------------------------------------------------------------------------
# Transport + REST provider
# ---------------------------------------------------------------------------


def test_list_bills_sends_bearer_token(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    fake = _install(monkeypatch, FakeResponse(200, [BILL]))
    bills = _provider(tokens).list_bills()
    assert [b.key for b in bills] == ["b1"]
    call = fake.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == f"{BASE}/bills"
    assert call["headers"]["Authorization"] == "Bearer tok-123"
    assert call["timeout"] == 5


def test_missing_token_fails_without_request(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    fake = _install(monkeypatch)
    provider = RestBillProvider(BASE, token_storage=FileTokenStorage(tmp_path / "none.json"))
    with pytest.raises(NotAuthenticatedError):
        provider.list_bills()
    assert fake.calls == []


def test_unauthorized_clears_session(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, FakeResponse(401, {"message": "Token expired"}))
    with pytest.raises(NotAuthenticatedError) as exc:
        _provider(tokens).list_bills()
    assert exc.value.error.message == "Token expired"
    assert tokens.load() is None


def test_server_error_is_normalized(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, FakeResponse(422, {"message": "Invalid bill", "errors": ["amount"]}))
    with pytest.raises(ApiRequestError) as exc:
        _provider(tokens).create_bill({"patientName": "A", "amount": 1})
    assert exc.value.error.message == "Invalid bill"
    assert exc.value.error.errors == ["amount"]
    assert exc.value.status == 422


def test_string_error_body(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, FakeResponse(500, text="Internal failure"))
    with pytest.raises(ApiRequestError) as exc:
        _provider(tokens).get_bill("b1")
    assert exc.value.error.message == "Internal failure"


def test_empty_error_body_defaults_message(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, FakeResponse(503))
    with pytest.raises(ApiRequestError) as exc:
        _provider(tokens).list_bills()
    assert exc.value.error.message == "Server error"
    assert exc.value.status == 503


def test_no_response_has_status_zero(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, requests.ConnectionError("refused"))
    with pytest.raises(ApiRequestError) as exc:
        _provider(tokens).list_bills()
    assert exc.value.status == 0
    assert exc.value.error.message == NO_RESPONSE


def test_not_found(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, FakeResponse(404, {"message": "Bill not found"}))
    with pytest.raises(NotFoundError):
        _provider(tokens).get_bill("nope")


def test_malformed_bill_record_is_api_error(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, FakeResponse(200, [BILL, {"_id": "b2", "amount": "lots"}]))
    with pytest.raises(ApiRequestError) as exc:
        _provider(tokens).list_bills()
    assert exc.value.error.message.startswith("Invalid bill in response")


def test_create_with_empty_body_is_api_error(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, FakeResponse(201))
    with pytest.raises(ApiRequestError) as exc:
        _provider(tokens).create_bill({"patientName": "A", "amount": 1})
    assert exc.value.error.message == "Unexpected response format"


def test_crud_paths(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    fake = _install(
        monkeypatch,
        FakeResponse(200, BILL),
        FakeResponse(200, {**BILL, "status": "Paid"}),
        FakeResponse(204),
    )
    provider = _provider(tokens)
    assert provider.get_bill("b1").patient_name == "Asha"
    assert provider.update_bill("b1", {**BILL, "status": "Paid"}).status == "Paid"
    assert provider.delete_bill("b1") is None
    assert [(c["method"], c["url"]) for c in fake.calls] == [
        ("GET", f"{BASE}/bills/b1"),
        ("PUT", f"{BASE}/bills/b1"),
        ("DELETE", f"{BASE}/bills/b1"),
    ]
    assert fake.calls[1]["json"]["status"] == "Paid"


# ---------------------------------------------------------------------------
# Bulk print fallback
# ---------------------------------------------------------------------------


def test_bulk_print_falls_back_on_not_found(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    fake = _install(monkeypatch, FakeResponse(404), FakeResponse(200, {"bills": [BILL]}))
    bills = _provider(tokens).bulk_print(["b1"])
    assert [b.key for b in bills] == ["b1"]
    assert [c["url"] for c in fake.calls] == [f"{BASE}/bills/bulk-print", f"{BASE}/bills/print/bulk"]
    assert fake.calls[0]["json"] == {"billIds": ["b1"]}


def test_bulk_print_stops_on_other_errors(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    fake = _install(monkeypatch, FakeResponse(500, {"message": "boom"}))
    with pytest.raises(ApiRequestError) as exc:
        _provider(tokens).bulk_print(["b1"])
    assert exc.value.status == 500
    assert len(fake.calls) == 1


def test_bulk_print_exhausted(monkeypatch: pytest.MonkeyPatch, tokens: FileTokenStorage) -> None:
    _install(monkeypatch, FakeResponse(404), FakeResponse(200, {"ok": True}), FakeResponse(404))
    with pytest.raises(NoValidEndpointError) as exc:
        _provider(tokens).bulk_print(["b1"])
    assert str(exc.value) == "No valid bulk print endpoint found"


def test_fallback_chain_order_and_shapes() -> None:
    tried: list[str] = []

    def call(candidate: str) -> Any:
        tried.append(candidate)
        if candidate == "/one":
            raise NotFoundError(ApiError(message="Not found", status=404))
        return {"data": [1, 2]}

    chain = EndpointFallbackChain(["/one", "/two", "/three"])
    assert chain.run(call) == [1, 2]
    assert tried == ["/one", "/two"]
    assert extract_bill_list([1]) == [1]
    assert extract_bill_list({"bills": [2]}) == [2]
    assert extract_bill_list({"data": "x"}) is None


# ---------------------------------------------------------------------------
# Local provider
# ---------------------------------------------------------------------------


def test_local_provider_assigns_identity_and_defaults(tmp_path) -> None:
    provider = LocalBillProvider(tmp_path / "bills.json")
    assert provider.list_bills() == []
    first = provider.create_bill({"patientName": "A", "amount": 100})
    second = provider.create_bill({"patientName": "B", "amount": "250.5", "chargeType": "Delivery"})
    assert first.key and first.key != second.key
    assert (first.serial_number, second.serial_number) == (1, 2)
    assert first.charge_type == "Other"
    assert first.status == "Pending"
    assert first.bill_date
    assert second.amount == 250.5


def test_local_provider_serial_survives_deletes(tmp_path) -> None:
    provider = LocalBillProvider(tmp_path / "bills.json")
    a = provider.create_bill({"patientName": "A", "amount": 1})
    b = provider.create_bill({"patientName": "B", "amount": 1})
    provider.delete_bill(a.key)
    c = provider.create_bill({"patientName": "C", "amount": 1})
    assert c.serial_number == b.serial_number + 1


def test_local_provider_rejects_invalid(tmp_path) -> None:
    provider = LocalBillProvider(tmp_path / "bills.json")
    with pytest.raises(ApiRequestError) as exc:
        provider.create_bill({"patientName": "A", "amount": 1, "chargeType": "Surgery"})
    assert exc.value.status == 400
    assert exc.value.error.errors == ["Invalid charge type. Must be one of: Consultation, Delivery"]


def test_local_provider_update_replaces_record(tmp_path) -> None:
    provider = LocalBillProvider(tmp_path / "bills.json")
    bill = provider.create_bill({"patientName": "A", "amount": 100, "phone": "9876543210"})
    updated = provider.update_bill(bill.key, {"patientName": "A. Kumar", "amount": 120, "status": "Paid"})
    assert updated.key == bill.key
    assert updated.serial_number == bill.serial_number
    assert updated.phone is None
    assert provider.get_bill(bill.key).status == "Paid"


def test_local_provider_missing_and_bulk(tmp_path) -> None:
    provider = LocalBillProvider(tmp_path / "bills.json")
    ids = [provider.create_bill({"patientName": n, "amount": 10}).key for n in "ABC"]
    with pytest.raises(NotFoundError):
        provider.delete_bill("missing")
    assert [b.patient_name for b in provider.bulk_print([ids[2], ids[0]])] == ["A", "C"]


def test_local_provider_unparseable_record_is_not_persisted(tmp_path) -> None:
    provider = LocalBillProvider(tmp_path / "bills.json")
    provider.create_bill({"patientName": "A", "amount": 10})
    with pytest.raises(ApiRequestError):
        provider.create_bill({"patientName": "B", "amount": 10, "address": {"city": "Mainpuri"}})
    assert [b.patient_name for b in provider.list_bills()] == ["A"]


def test_local_provider_write_failure_is_api_error(tmp_path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    provider = LocalBillProvider(blocker / "bills.json")
    with pytest.raises(ApiRequestError) as exc:
        provider.list_bills()
    assert exc.value.status == 500
    assert exc.value.error.message.startswith("Failed to write bills store")


# ---------------------------------------------------------------------------
# Session / auth / factory
# ---------------------------------------------------------------------------


def test_token_storage_round_trip(tmp_path) -> None:
    storage = FileTokenStorage(tmp_path / "s" / "session.json", key="user")
    assert storage.token() is None
    storage.save({"token": "abc", "name": "N"})
    assert storage.token() == "abc"
    assert json.loads((tmp_path / "s" / "session.json").read_text())["user"]["name"] == "N"
    storage.clear()
    assert storage.load() is None


def test_login_persists_user(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    fake = _install(monkeypatch, FakeResponse(200, {"email": "a@b.c", "token": "t1"}))
    storage = FileTokenStorage(tmp_path / "session.json")
    auth = AuthService(HttpTransport(BASE, token_storage=storage), storage)
    auth.login({"email": "a@b.c", "password": "pw"})
    assert auth.is_logged_in
    assert fake.calls[0]["url"] == f"{BASE}/auth/login"
    assert "Authorization" not in fake.calls[0]["headers"]
    auth.logout()
    assert not auth.is_logged_in


def test_login_without_token_fails(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    _install(monkeypatch, FakeResponse(200, {"email": "a@b.c"}))
    storage = FileTokenStorage(tmp_path / "session.json")
    with pytest.raises(ApiRequestError):
        AuthService(HttpTransport(BASE, token_storage=storage), storage).login({"email": "a@b.c"})
    assert storage.load() is None


def test_factory_selects_backend(tmp_path) -> None:
    local = create_bill_api(AppConfig(backend="local", local_store_path=str(tmp_path / "b.json")))
    assert isinstance(local, LocalBillProvider)
    rest = create_bill_api(AppConfig(backend="rest", session_path=str(tmp_path / "s.json")))
    assert isinstance(rest, RestBillProvider)
