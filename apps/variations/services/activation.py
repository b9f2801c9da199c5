"""
Activation and bulk-edit operations on a working set.

Every function takes a WorkingSet and returns a new one; the input is never
changed. After a field edit (single or bulk) a record is modified exactly
when its editable fields differ from their generation defaults; activation
toggles leave the flag alone.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

from .catalog import OptionCatalog
from .generator import NAME_SEPARATOR, build_combination
from .records import (
    EDITABLE_FIELDS,
    Combination,
    OptionKey,
    Origin,
    WorkingSet,
    as_ref,
    to_decimal,
)
from .tree import PATH_SEPARATOR, AttributeForest


class OutcomeReason(str, Enum):
    CREATED = 'created'
    EMPTY_SELECTION = 'empty_selection'
    UNKNOWN_OPTION = 'unknown_option'
    CONFLICTING_SELECTION = 'conflicting_selection'
    ALREADY_EXISTS = 'already_exists'


@dataclass(frozen=True)
class Outcome:
    """Explicit success/failure signal for operations with expected failures."""
    ok: bool
    working_set: WorkingSet
    reason: OutcomeReason
    message: str = ''
    combination: Optional[Combination] = None


def _validated_stock(value) -> int:
    stock = int(value)
    if stock < 0:
        raise ValueError(f"Stock must be non-negative, got {stock}")
    return stock


def _edited(combination: Combination, **changes) -> Combination:
    updated = replace(combination, **changes)
    return replace(updated, modified=updated.diverges_from_defaults())


# =============================================================================
# Activation
# =============================================================================

def toggle_active(working_set: WorkingSet, combination_id: str) -> WorkingSet:
    combination = working_set.get(combination_id)
    return working_set.replaced({
        combination_id: replace(combination, active=not combination.active)
    })


def set_all_active(working_set: WorkingSet, active: bool) -> WorkingSet:
    return WorkingSet(replace(c, active=active) for c in working_set)


# =============================================================================
# Bulk and single edits
# =============================================================================

def apply_bulk_price(working_set: WorkingSet, value) -> WorkingSet:
    """Set price_delta on every active combination."""
    price = to_decimal(value)
    return working_set.replaced({
        c.id: _edited(c, price_delta=price)
        for c in working_set.active()
    })


def apply_bulk_stock(working_set: WorkingSet, value) -> WorkingSet:
    """Set stock on every active combination."""
    stock = _validated_stock(value)
    return working_set.replaced({
        c.id: _edited(c, stock=stock)
        for c in working_set.active()
    })


def edit_combination(working_set: WorkingSet, combination_id: str, **changes) -> WorkingSet:
    """
    Edit the editable fields of one combination.

    Unchanged values leave the record untouched; editing every field back
    to its generation default clears ``modified`` again.
    """
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")
    if 'price_delta' in changes:
        changes['price_delta'] = to_decimal(changes['price_delta'])
    if 'stock' in changes:
        changes['stock'] = _validated_stock(changes['stock'])

    combination = working_set.get(combination_id)
    if all(getattr(combination, name) == value for name, value in changes.items()):
        return working_set
    return working_set.replaced({
        combination_id: _edited(combination, **changes)
    })


def restore_defaults(working_set: WorkingSet, combination_id: str) -> WorkingSet:
    combination = working_set.get(combination_id)
    return working_set.replaced({combination_id: combination.with_defaults_restored()})


def reset_inactive(working_set: WorkingSet) -> WorkingSet:
    """Restore the defaults of every inactive combination not yet stored."""
    return working_set.replaced({
        c.id: c.with_defaults_restored()
        for c in working_set
        if not c.active and not c.persisted
    })


# =============================================================================
# Custom combinations and removal
# =============================================================================

def create_custom(
    working_set: WorkingSet,
    forest: AttributeForest,
    catalog: OptionCatalog,
    option_refs: Iterable[Tuple[str, str]],
    name_separator: str = NAME_SEPARATOR,
    path_separator: str = PATH_SEPARATOR,
) -> Outcome:
    """
    Create a combination from option values picked one at a time.

    ``option_refs`` are ``(attribute_id, option_id)`` pairs. Rejected, never
    merged, when the selection is empty, references an unknown or inactive
    option, picks two values of the same attribute, or matches a
    combination that already exists.
    """
    option_refs = [as_ref(ref) for ref in option_refs]
    if not option_refs:
        return Outcome(
            ok=False,
            working_set=working_set,
            reason=OutcomeReason.EMPTY_SELECTION,
            message='Select at least one option value',
        )

    options = []
    attributes = set()
    for ref in dict.fromkeys(option_refs):
        attribute_id, option_id = ref
        if ref not in catalog or not catalog.get(ref).active:
            return Outcome(
                ok=False,
                working_set=working_set,
                reason=OutcomeReason.UNKNOWN_OPTION,
                message=f"Option {option_id} does not exist or is inactive",
            )
        if attribute_id in attributes:
            return Outcome(
                ok=False,
                working_set=working_set,
                reason=OutcomeReason.CONFLICTING_SELECTION,
                message=f"More than one value selected for {forest.path_label(attribute_id)}",
            )
        attributes.add(attribute_id)
        options.append(catalog.get(ref))

    existing = working_set.find_by_key(OptionKey(o.ref for o in options))
    if existing is not None:
        return Outcome(
            ok=False,
            working_set=working_set,
            reason=OutcomeReason.ALREADY_EXISTS,
            message=f"Combination {existing.name!r} already exists",
            combination=existing,
        )

    combination = build_combination(
        forest,
        options,
        origin=Origin.CUSTOM,
        active=True,
        name_separator=name_separator,
        path_separator=path_separator,
    )
    return Outcome(
        ok=True,
        working_set=working_set.with_added(combination),
        reason=OutcomeReason.CREATED,
        message=f"Combination {combination.name!r} created",
        combination=combination,
    )


def remove_combination(
    working_set: WorkingSet, combination_id: str
) -> Tuple[WorkingSet, Combination]:
    """
    Remove one combination; the caller deletes it from the store if persisted.

    An automatic combination comes back, inactive, on the next regeneration
    while its options are still live; deactivate it instead to keep it out of
    the store. A removed custom combination stays gone.
    """
    removed = working_set.get(combination_id)
    return working_set.without(combination_id), removed


def remove_all(working_set: WorkingSet) -> Tuple[WorkingSet, Tuple[Combination, ...]]:
    """Clear the working set; the caller removes every stored row of the scope."""
    return WorkingSet(), tuple(working_set)
