from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from ledgersync.adapters.airtable import AirtableLedgerStore, LedgerStoreError
from ledgersync.adapters.http_resilience import ResilientClient
from ledgersync.config import AirtableConfig, RateLimit, ResilienceConfig
from ledgersync.domain.model import LedgerField

BASE_URL = "https://api.airtable.com/v0/"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def _store(
    handler: Callable[[httpx.Request], httpx.Response],
    **kwargs: object,
) -> AirtableLedgerStore:
    config = AirtableConfig(
        api_key="key123",
        base_id="appBase",
        table_name="Employees",
        resilience=ResilienceConfig(
            name="airtable",
            base_url=BASE_URL,
            ratelimit=RateLimit(max_calls=100, per_seconds=1.0),
        ),
    )
    return AirtableLedgerStore(
        config=config,
        client_factory=_make_client_factory(handler),
        **kwargs,  # type: ignore[arg-type]
    )


def test_fetch_all_follows_offsets_until_exhausted() -> None:
    requests: list[httpx.Request] = []
    pages = {
        None: {
            "records": [{"id": "rec1", "fields": {"RSC Emp ID": "1", "Name": "One"}}],
            "offset": "itrNext",
        },
        "itrNext": {"records": [{"id": "rec2", "fields": {"RSC Emp ID": "2"}}]},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=pages[request.url.params.get("offset")])

    store = _store(handler, page_size=50)
    records = store.fetch_all((LedgerField.EMPLOYEE_ID, LedgerField.NAME))

    assert [record.record_id for record in records] == ["rec1", "rec2"]
    assert records[0].fields.name == "One"
    assert len(requests) == 2
    first = requests[0]
    assert first.method == "GET"
    assert str(first.url).startswith("https://api.airtable.com/v0/appBase/Employees?")
    assert first.url.params.get_list("fields[]") == ["RSC Emp ID", "Name"]
    assert first.url.params["pageSize"] == "50"
    assert first.headers["Authorization"] == "Bearer key123"
    assert requests[1].url.params["offset"] == "itrNext"


def test_update_patches_with_explicit_nulls() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "recA", "fields": {"Phone": "5551234567"}})

    record = _store(handler).update(
        "recA", {LedgerField.PHONE: "5551234567", LedgerField.EMAIL: None}
    )

    assert captured["method"] == "PATCH"
    assert captured["url"] == "https://api.airtable.com/v0/appBase/Employees/recA"
    assert captured["body"] == {"fields": {"Phone": "5551234567", "Email": None}}
    assert record.fields.phone == "5551234567"


def test_create_posts_to_table_and_quotes_table_name() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.raw_path.decode()
        return httpx.Response(200, json={"id": "recNew", "fields": {"Role": "Guard"}})

    record = _store(handler, table_name="Employee Roles").create({LedgerField.ROLE: "Guard"})

    assert captured["method"] == "POST"
    assert captured["path"] == "/v0/appBase/Employee%20Roles"
    assert record.record_id == "recNew"


def test_api_errors_raise_ledger_store_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            422,
            json={"error": {"type": "INVALID_VALUE_FOR_COLUMN", "message": "Bad status"}},
        )

    with pytest.raises(LedgerStoreError) as excinfo:
        _store(handler).update("recA", {LedgerField.LISTED_STATUS: "Active"})

    assert excinfo.value.status == 422
    assert excinfo.value.error_type == "INVALID_VALUE_FOR_COLUMN"
    assert "Bad status" in str(excinfo.value)


def test_terse_error_payload_is_understood() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "NOT_FOUND"})

    with pytest.raises(LedgerStoreError) as excinfo:
        _store(handler).fetch_all((LedgerField.NAME,))

    assert excinfo.value.status == 404
    assert excinfo.value.error_type == "NOT_FOUND"


def test_malformed_listing_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"records": [{"fields": {}}]})

    with pytest.raises(LedgerStoreError, match="Unexpected"):
        _store(handler).fetch_all((LedgerField.NAME,))
