"""HTTP client for the Airtable REST API acting as the ledger store."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ledgersync.adapters.http_resilience import ResilientClient
from ledgersync.config.airtable import AIRTABLE_BASE_URL
from ledgersync.config.sync import DEFAULT_PAGE_SIZE

from .schema import AirtableRecordPayload, ErrorResponse, ListRecordsResponse
from .translator import LedgerSchema, changes_to_payload, record_from_payload

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ledgersync.config import AirtableConfig, ResilienceConfig
    from ledgersync.domain.model import FieldChanges, LedgerField, LedgerRecord

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class LedgerStoreError(RuntimeError):
    """Raised when the Airtable API rejects a request."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        error_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.error_type = error_type


@dataclass(slots=True)
class AirtableLedgerStore:
    """Ledger store backed by one Airtable table.

    Each call runs its own event loop; listing follows ``offset`` until the
    table is exhausted and returns nothing on partial reads.
    """

    config: AirtableConfig
    table_name: str | None = None
    schema: LedgerSchema = field(default_factory=LedgerSchema)
    page_size: int = DEFAULT_PAGE_SIZE
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    @property
    def table_url(self) -> str:
        base_url = self.config.resilience.base_url or AIRTABLE_BASE_URL
        table = quote(self.table_name or self.config.table_name, safe="")
        return f"{base_url.rstrip('/')}/{self.config.base_id}/{table}"

    def fetch_all(self, fields: Sequence[LedgerField]) -> list[LedgerRecord]:
        return asyncio.run(self._fetch_all_async(fields))

    def update(self, record_id: str, changes: FieldChanges) -> LedgerRecord:
        body = {"fields": changes_to_payload(changes, self.schema)}
        url = f"{self.table_url}/{quote(record_id, safe='')}"
        return asyncio.run(self._write_async("PATCH", url, body))

    def create(self, changes: FieldChanges) -> LedgerRecord:
        body = {"fields": changes_to_payload(changes, self.schema)}
        return asyncio.run(self._write_async("POST", self.table_url, body))

    def _client(self) -> ResilientClient:
        auth = {"Authorization": f"Bearer {self.config.api_key}"}
        return self.client_factory(replace(self.config.resilience, default_headers=auth))

    async def _fetch_all_async(self, fields: Sequence[LedgerField]) -> list[LedgerRecord]:
        columns = [self.schema.column(ledger_field) for ledger_field in fields]
        records: list[LedgerRecord] = []
        offset: str | None = None
        page = 0

        async with self._client() as client:
            while True:
                params: list[tuple[str, str | int]] = [("pageSize", self.page_size)]
                params.extend(("fields[]", column) for column in columns)
                if offset is not None:
                    params.append(("offset", offset))

                response = await client.get(self.table_url, params=httpx.QueryParams(params))
                listing = self._parse(response, ListRecordsResponse)
                page += 1
                records.extend(record_from_payload(item, self.schema) for item in listing.records)
                log.debug("Fetched page %s (%s records)", page, len(listing.records))
                if not listing.offset:
                    break
                offset = listing.offset

        log.info("Fetched %s ledger records in %s page(s)", len(records), page)
        return records

    async def _write_async(self, method: str, url: str, body: dict[str, object]) -> LedgerRecord:
        async with self._client() as client:
            response = await client.request(method, url, json=body)
        payload = self._parse(response, AirtableRecordPayload)
        return record_from_payload(payload, self.schema)

    def _parse[TModel: (ListRecordsResponse, AirtableRecordPayload)](
        self,
        response: httpx.Response,
        model: type[TModel],
    ) -> TModel:
        if not response.is_success:
            raise self._error_from(response)
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise LedgerStoreError(
                f"Unexpected Airtable response payload: {exc}", status=response.status_code
            ) from exc

    @staticmethod
    def _error_from(response: httpx.Response) -> LedgerStoreError:
        error_type: str | None = None
        message = response.reason_phrase or "request failed"
        try:
            detail = ErrorResponse.model_validate(response.json()).error
        except (ValueError, ValidationError):
            detail = None
        if detail is not None:
            error_type = detail.type
            message = detail.message or detail.type or message
        log.error("Airtable API error %s (%s): %s", response.status_code, error_type, message)
        return LedgerStoreError(
            f"Airtable API error {response.status_code}: {message}",
            status=response.status_code,
            error_type=error_type,
        )
