"""Canonical record selection.

Several source rows may describe one person. They are grouped by shared
identity keys and each group collapses to a single authoritative row before
any ledger lookup happens, so a person contributes exactly one decision to the
rest of the pass.
"""

from __future__ import annotations

import logging
from datetime import UTC
from typing import TYPE_CHECKING

from ledgersync.domain.model import MatchKeyKind

from .keys import connected_groups, keys_for_source

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from ledgersync.domain.model import SourceEntity

DEFAULT_GROUPING_KEYS: tuple[MatchKeyKind, ...] = (MatchKeyKind.EMPLOYEE_ID, MatchKeyKind.EMAIL)

log = logging.getLogger(__name__)


def pick_preferred[T](
    items: Sequence[T],
    *,
    is_active: Callable[[T], bool],
    timestamp: Callable[[T], datetime | None],
) -> T:
    """Pick the active, most recent item; ties keep input order.

    Falls back to every item when none is active.
    """

    if not items:
        raise ValueError("Cannot pick a preferred item from an empty group")
    active = [item for item in items if is_active(item)]
    pool = active or list(items)
    best = pool[0]
    best_rank = _recency_rank(timestamp(best))
    for item in pool[1:]:
        rank = _recency_rank(timestamp(item))
        if rank > best_rank:
            best, best_rank = item, rank
    return best


def _recency_rank(value: datetime | None) -> tuple[int, float]:
    if value is None:
        return (0, 0.0)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (1, value.timestamp())


def _source_timestamp(entity: SourceEntity) -> datetime | None:
    return entity.updated_at or entity.created_at


def select_canonical(group: Sequence[SourceEntity]) -> SourceEntity:
    """Return the authoritative row of a non-empty duplicate group."""

    return pick_preferred(
        group,
        is_active=lambda entity: entity.active,
        timestamp=_source_timestamp,
    )


def group_by_identity(
    entities: Sequence[SourceEntity],
    *,
    key_kinds: Sequence[MatchKeyKind] = DEFAULT_GROUPING_KEYS,
) -> list[tuple[SourceEntity, ...]]:
    """Group rows connected through any shared key of ``key_kinds``.

    Groups are ordered by their first member; members keep input order.
    """

    groups = connected_groups(entities, lambda entity: keys_for_source(entity, key_kinds))
    return [members for members, _ in groups]


def canonical_entities(
    entities: Sequence[SourceEntity],
    *,
    key_kinds: Sequence[MatchKeyKind] = DEFAULT_GROUPING_KEYS,
) -> list[SourceEntity]:
    """Collapse ``entities`` to one canonical row per identity group."""

    canonical: list[SourceEntity] = []
    for group in group_by_identity(entities, key_kinds=key_kinds):
        chosen = select_canonical(group)
        if len(group) > 1:
            log.info(
                "Collapsed %s source rows into id=%s (active=%s)",
                len(group),
                chosen.id,
                chosen.active,
            )
        canonical.append(chosen)
    return canonical
