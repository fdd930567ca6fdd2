"""Canonical forms for raw field values.

Every function here is pure, total and idempotent: feeding a function its own
output returns the same value, and malformed input yields ``None`` instead of
raising.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Final

from ledgersync.domain.model import EmploymentStatus, ListedStatus

PHONE_DIGITS: Final[int] = 10
UNKNOWN_REGION: Final[str] = "Unknown"

_NON_DIGITS = re.compile(r"\D")
_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%d-%b-%Y",
    "%b %d, %Y",
)
_TENANT_REGIONS: Final[dict[str, str]] = {
    "2": "CA",
    "3": "LA",
    "4": "GA",
    "5": "NM",
    "6": "CA",
    "13": "UK",
}


@dataclass(frozen=True, slots=True)
class StatusPair:
    listed_status: ListedStatus
    employment_status: EmploymentStatus


_ACTIVE_STATUS = StatusPair(ListedStatus.ACTIVE, EmploymentStatus.HIRED)
_INACTIVE_STATUS = StatusPair(ListedStatus.INACTIVE, EmploymentStatus.SEPARATED)


def normalize_phone(raw: str | int | None) -> str | None:
    """Return the last ten digits of ``raw``, or ``None`` when fewer are present."""

    if raw is None:
        return None
    digits = _NON_DIGITS.sub("", str(raw))
    if len(digits) < PHONE_DIGITS:
        return None
    return digits[-PHONE_DIGITS:]


def normalize_date(raw: date | str | None) -> str | None:
    """Render a date-like value as ``MM/DD/YYYY`` using UTC calendar fields."""

    if raw is None:
        return None
    if isinstance(raw, datetime):
        parsed: date | None = _utc_calendar_date(raw)
    elif isinstance(raw, date):
        parsed = raw
    elif isinstance(raw, str):
        parsed = _parse_date_text(raw)
    else:
        return None
    if parsed is None:
        return None
    return f"{parsed.month:02d}/{parsed.day:02d}/{parsed.year:04d}"


def normalize_status(active: bool) -> StatusPair:  # noqa: FBT001
    """Map the source active flag onto the ledger's two status fields."""

    return _ACTIVE_STATUS if active else _INACTIVE_STATUS


def normalize_region(tenant_id: str | int | None) -> str:
    if tenant_id is None:
        return UNKNOWN_REGION
    return _TENANT_REGIONS.get(str(tenant_id).strip(), UNKNOWN_REGION)


def normalize_email(raw: str | None) -> str | None:
    if raw is None:
        return None
    email = raw.strip().lower()
    return email or None


def normalize_text(raw: str | None) -> str | None:
    """Collapse whitespace; keeps case so display values survive."""

    if raw is None:
        return None
    text = " ".join(str(raw).split())
    return text or None


def normalize_name_key(raw: str | None) -> str | None:
    """Aggressive name folding used only for identity matching."""

    if raw is None:
        return None
    text = unicodedata.normalize("NFKC", raw)
    text = text.casefold()
    text = "".join(ch for ch in text if not unicodedata.category(ch).startswith("P"))
    text = " ".join(text.split())
    return text or None


def _utc_calendar_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.date()


def _parse_date_text(raw: str) -> date | None:
    text = raw.strip()
    if not text:
        return None
    for pattern in _DATE_FORMATS:
        try:
            return datetime.strptime(text, pattern).date()  # noqa: DTZ007
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _utc_calendar_date(parsed)
