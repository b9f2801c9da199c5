"""
Persistence collaborator for combinations.

The engine only needs before/after snapshots, so the contract is small:
load every stored record of a scope, upsert one record, delete one record,
delete a whole scope.
"""

import logging
from typing import List, Protocol

from django.db import DatabaseError, transaction

from apps.variations.models import Combination as CombinationModel
from apps.variations.models import OptionValue as OptionValueModel

from .exceptions import PersistenceError
from .records import Combination, CombinationDefaults, OptionKey, Origin


logger = logging.getLogger(__name__)


class CombinationStore(Protocol):
    def load_persisted(self, scope_id) -> List[Combination]:
        ...

    def upsert(self, scope_id, combination: Combination) -> int:
        ...

    def delete(self, storage_id) -> None:
        ...

    def delete_scope(self, scope_id) -> int:
        ...


def _to_record(row: CombinationModel) -> Combination:
    values = dict(
        name=row.name,
        sku=row.sku,
        barcode=row.barcode,
        price_delta=row.price_delta,
        stock=row.stock,
        notes=row.notes,
    )
    defaults = CombinationDefaults(**{**values, **(row.defaults or {})})
    return Combination(
        id=str(row.pk),
        key=OptionKey.from_canonical(row.option_key),
        attribute_paths=tuple(row.attribute_paths or ()),
        option_names=tuple(row.option_names or ()),
        is_composite=row.is_composite,
        active=row.is_active,
        origin=Origin(row.origin),
        modified=row.is_modified,
        storage_id=row.pk,
        defaults=defaults,
        **values,
    )


def _row_values(combination: Combination) -> dict:
    defaults = combination.defaults.as_dict()
    defaults['price_delta'] = str(defaults['price_delta'])
    return {
        'attribute_paths': list(combination.attribute_paths),
        'option_names': list(combination.option_names),
        'is_composite': combination.is_composite,
        'name': combination.name,
        'sku': combination.sku,
        'barcode': combination.barcode,
        'price_delta': combination.price_delta,
        'stock': combination.stock,
        'notes': combination.notes,
        'is_active': combination.active,
        'origin': combination.origin.value,
        'is_modified': combination.modified,
        'defaults': defaults,
    }


class DjangoCombinationStore:
    """
    CombinationStore backed by the Combination model.

    Rows are matched by (template, option_key), so upserting a record whose
    storage id is unknown still updates the existing row. Database errors are
    re-raised as PersistenceError with the original exception chained.
    """

    def load_persisted(self, scope_id) -> List[Combination]:
        try:
            rows = list(CombinationModel.objects.filter(template_id=scope_id).order_by('pk'))
        except DatabaseError as e:
            raise PersistenceError(f"Could not load combinations: {e}") from e
        return [_to_record(row) for row in rows]

    def upsert(self, scope_id, combination: Combination) -> int:
        try:
            with transaction.atomic():
                row, created = CombinationModel.objects.update_or_create(
                    template_id=scope_id,
                    option_key=combination.key.canonical(),
                    defaults=_row_values(combination),
                )
                row.options.set(OptionValueModel.objects.filter(
                    pk__in=[int(option_id) for option_id in combination.key.option_ids()],
                    attribute__template_id=scope_id,
                ))
        except (DatabaseError, ValueError) as e:
            raise PersistenceError(
                f"Could not save combination {combination.name!r}: {e}"
            ) from e
        logger.debug(
            "%s combination %s (%s)", 'Created' if created else 'Updated', row.pk, row.name
        )
        return row.pk

    def delete(self, storage_id) -> None:
        try:
            CombinationModel.objects.filter(pk=storage_id).delete()
        except DatabaseError as e:
            raise PersistenceError(f"Could not delete combination {storage_id}: {e}") from e

    def delete_scope(self, scope_id) -> int:
        try:
            _, per_model = CombinationModel.objects.filter(template_id=scope_id).delete()
        except DatabaseError as e:
            raise PersistenceError(f"Could not delete combinations: {e}") from e
        return per_model.get(CombinationModel._meta.label, 0)
