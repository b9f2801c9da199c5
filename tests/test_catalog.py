from decimal import Decimal

import pytest

from apps.variations.services import (
    AttributeForest,
    AttributeNode,
    CatalogError,
    OptionCatalog,
    OptionValue,
    generate_combinations,
)


def test_options_are_grouped_per_leaf_in_order(catalog):
    assert [o.name for o in catalog.options_for('tipo')] == ['Couché', 'Reciclado']
    assert catalog.get(('cor', 'preto')).name == 'Preto'
    assert catalog.get(('tipo', 'reciclado')).price_delta == Decimal('1.50')
    assert catalog.refs_for('preto') == [('cor', 'preto')]
    assert catalog.refs_for('nope') == []
    assert catalog.options_for('papel') == []
    assert len(catalog) == 5


def test_inactive_options_are_kept_but_not_live(forest):
    catalog = OptionCatalog(forest, [
        OptionValue('azul', 'cor', 'Azul'),
        OptionValue('preto', 'cor', 'Preto', active=False),
    ])
    assert ('cor', 'preto') in catalog
    assert [o.id for o in catalog.active_options('cor')] == ['azul']
    assert catalog.live_refs() == frozenset({('cor', 'azul')})


def test_same_option_id_on_different_leaves():
    forest = AttributeForest([AttributeNode('cor', 'Cor'), AttributeNode('tam', 'Tamanho')])
    catalog = OptionCatalog(forest, [
        OptionValue('1', 'cor', 'Azul'),
        OptionValue('1', 'tam', 'P'),
    ])

    assert len(catalog) == 2
    assert catalog.get(('cor', '1')).name == 'Azul'
    assert catalog.get(('tam', '1')).name == 'P'
    assert catalog.refs_for('1') == [('cor', '1'), ('tam', '1')]

    combinations = generate_combinations(forest, catalog)
    composite = [c for c in combinations if c.is_composite]
    assert len(combinations) == 3
    assert len(composite) == 1
    assert composite[0].key == {('cor', '1'), ('tam', '1')}
    assert len(composite[0].key) == 2


def test_option_on_non_leaf_attribute_rejected(forest):
    with pytest.raises(CatalogError) as exc_info:
        OptionCatalog(forest, [OptionValue('x', 'papel', 'X')])
    assert exc_info.value.option_id == 'x'


def test_option_on_unknown_attribute_rejected(forest):
    with pytest.raises(CatalogError):
        OptionCatalog(forest, [OptionValue('x', 'tamanho', 'X')])


def test_duplicate_option_in_same_leaf_rejected(forest):
    with pytest.raises(CatalogError):
        OptionCatalog(forest, [
            OptionValue('azul', 'cor', 'Azul'),
            OptionValue('azul', 'cor', 'Azul de novo'),
        ])


def test_negative_stock_rejected(forest):
    with pytest.raises(CatalogError):
        OptionCatalog(forest, [OptionValue('azul', 'cor', 'Azul', stock=-1)])
