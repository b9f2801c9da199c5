"""
Reconciliation of freshly generated combinations against a prior set.

Records are matched by value identity (their OptionKey), never by record id,
so a regenerated combination finds its persisted counterpart even when the
generator numbered it differently.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .records import Combination, OptionKey, Origin, WorkingSet


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationStats:
    added: int = 0
    refreshed: int = 0
    preserved: int = 0
    kept_custom: int = 0
    orphaned: int = 0
    dropped: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.orphaned or self.dropped)


@dataclass(frozen=True)
class ReconciliationResult:
    """
    working_set: the merged records.
    orphaned: persisted records whose options disappeared; the caller must
        delete them from the store explicitly.
    """
    working_set: WorkingSet
    orphaned: Tuple[Combination, ...]
    stats: ReconciliationStats


def _refresh_derived(kept: Combination, fresh: Combination) -> Combination:
    """Update only the convenience fields of a user-edited record."""
    return replace(
        kept,
        attribute_paths=fresh.attribute_paths,
        option_names=fresh.option_names,
        is_composite=fresh.is_composite,
        defaults=fresh.defaults,
    )


def reconcile(
    transient: Iterable[Combination],
    persisted: Iterable[Combination],
    live_refs: Optional[FrozenSet[Tuple[str, str]]] = None,
) -> ReconciliationResult:
    """
    Merge ``transient`` (just generated) against ``persisted`` (stored or drafted).

    - persisted and unmodified: fresh aggregates and name, with the persisted
      id, storage id, activation and origin carried over;
    - persisted and modified: the persisted record wins, only its derived
      fields are refreshed;
    - not persisted: kept as a new, inactive record.

    Persisted records with no fresh counterpart leave the working set. Custom
    records survive when every option they reference is still live. Stored
    ones are reported in ``orphaned``.

    Running the merge again on its own output changes nothing.
    """
    index: Dict[OptionKey, Combination] = {}
    for record in persisted:
        index.setdefault(record.key, record)

    merged = []
    seen = set()
    added = refreshed = preserved = 0

    for fresh in transient:
        if fresh.key in seen:
            continue
        seen.add(fresh.key)

        prior = index.get(fresh.key)
        if prior is None:
            merged.append(replace(fresh, active=False, storage_id=None, modified=False))
            added += 1
        elif prior.modified:
            merged.append(_refresh_derived(prior, fresh))
            preserved += 1
        else:
            merged.append(replace(
                fresh,
                id=prior.id,
                storage_id=prior.storage_id,
                active=prior.active,
                origin=prior.origin,
                modified=False,
            ))
            refreshed += 1

    orphaned = []
    kept_custom = dropped = 0
    for key, prior in index.items():
        if key in seen:
            continue
        if (
            prior.origin is Origin.CUSTOM
            and live_refs is not None
            and key <= live_refs
        ):
            merged.append(prior)
            kept_custom += 1
        elif prior.persisted:
            orphaned.append(prior)
        else:
            dropped += 1

    stats = ReconciliationStats(
        added=added,
        refreshed=refreshed,
        preserved=preserved,
        kept_custom=kept_custom,
        orphaned=len(orphaned),
        dropped=dropped,
    )
    logger.info(
        "Reconciled %d combinations: %d added, %d refreshed, %d preserved, "
        "%d custom kept, %d orphaned, %d dropped",
        len(merged), added, refreshed, preserved, kept_custom, len(orphaned), dropped,
    )
    return ReconciliationResult(
        working_set=WorkingSet(merged),
        orphaned=tuple(orphaned),
        stats=stats,
    )
