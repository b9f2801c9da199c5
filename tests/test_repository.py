from dataclasses import replace
from decimal import Decimal

import pytest

from apps.variations.models import Combination as CombinationModel
from apps.variations.services import Origin, WorkingSet, generate_combinations
from apps.variations.services.draft_cache import DraftCache
from apps.variations.services.repository import DjangoCombinationStore
from apps.variations.services.sources import load_forest


pytestmark = pytest.mark.django_db


@pytest.fixture
def store():
    return DjangoCombinationStore()


@pytest.fixture
def generated(template):
    forest, catalog = load_forest(template)
    return generate_combinations(forest, catalog)


def _find(combinations, *refs):
    return next(c for c in combinations if c.key == set(refs))


def test_load_forest_reads_tree_and_options(template, option_refs):
    forest, catalog = load_forest(template)

    assert len(forest) == 4
    assert [forest.node(root).name for root in forest.roots()] == ['Papel', 'Cor']
    assert [forest.path_label(leaf) for leaf in forest.leaves()] == [
        'Papel > Tipo', 'Papel > Gramatura', 'Cor'
    ]
    assert len(catalog) == 5
    assert catalog.get(option_refs['Preto']).price_delta == Decimal('-2.00')


def test_upsert_creates_then_updates_by_option_key(template, option_refs, store, generated):
    azul = _find(generated, option_refs['Azul'])

    storage_id = store.upsert(template.pk, replace(azul, active=True))
    again = store.upsert(template.pk, replace(azul, name='Azul Royal', modified=True))

    assert storage_id == again
    row = CombinationModel.objects.get(pk=storage_id)
    assert row.name == 'Azul Royal'
    assert row.is_modified
    attribute_id, option_id = option_refs['Azul']
    assert row.option_key == f'{attribute_id}:{option_id}'
    assert row.get_option_ids() == [option_id]
    assert list(row.options.values_list('name', flat=True)) == ['Azul']
    assert row.defaults['name'] == 'Cor - Azul'
    assert CombinationModel.objects.count() == 1


def test_upsert_records_history(template, option_refs, store, generated):
    azul = _find(generated, option_refs['Azul'])

    storage_id = store.upsert(template.pk, azul)
    store.upsert(template.pk, replace(azul, stock=2, modified=True))

    row = CombinationModel.objects.get(pk=storage_id)
    assert row.history.count() == 2


def test_load_persisted_returns_records(template, option_refs, store, generated):
    composite = _find(
        generated, option_refs['Couché'], option_refs['250g'], option_refs['Azul']
    )
    storage_id = store.upsert(template.pk, replace(composite, active=True))

    [record] = store.load_persisted(template.pk)

    assert record.id == str(storage_id)
    assert record.storage_id == storage_id
    assert record.persisted
    assert record.key == composite.key
    assert record.active
    assert record.is_composite
    assert record.origin is Origin.AUTOMATIC
    assert record.price_delta == composite.price_delta
    assert record.attribute_paths == composite.attribute_paths
    assert record.defaults == composite.defaults


def test_delete_and_delete_scope(template, option_refs, store, generated):
    ids = [store.upsert(template.pk, c) for c in generated[:3]]

    store.delete(ids[0])
    assert CombinationModel.objects.count() == 2

    assert store.delete_scope(template.pk) == 2
    assert store.load_persisted(template.pk) == []


def test_draft_cache(template, generated):
    draft = DraftCache()
    assert not draft.exists(template.pk)
    assert draft.load(template.pk) is None

    working_set = WorkingSet(generated)
    draft.save(template.pk, working_set)

    assert draft.exists(template.pk)
    assert draft.load(template.pk) == working_set
    assert len(draft.load_persisted(template.pk)) == len(generated)

    draft.clear(template.pk)
    assert not draft.exists(template.pk)
