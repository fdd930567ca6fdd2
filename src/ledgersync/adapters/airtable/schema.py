"""Pydantic models describing the Airtable REST payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime  # noqa: TC003
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AirtableBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AirtableRecordPayload(AirtableBaseModel):
    id: str
    created_time: datetime | None = Field(default=None, alias="createdTime")
    fields: dict[str, object] = Field(default_factory=dict)


class ListRecordsResponse(AirtableBaseModel):
    records: list[AirtableRecordPayload] = Field(default_factory=list)
    offset: str | None = None


class ErrorDetail(AirtableBaseModel):
    type: str | None = None
    message: str | None = None


class ErrorResponse(AirtableBaseModel):
    """``{"error": {...}}`` or the terse ``{"error": "NOT_FOUND"}`` form."""

    error: ErrorDetail

    @model_validator(mode="before")
    @classmethod
    def _expand_terse_error(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping_value = cast(Mapping[str, object], value)
            error = mapping_value.get("error")
            if isinstance(error, str):
                return {"error": {"type": error, "message": error}}
        return value
