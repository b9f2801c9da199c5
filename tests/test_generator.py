from decimal import Decimal

from apps.variations.services import (
    AttributeForest,
    AttributeNode,
    OptionCatalog,
    OptionKey,
    OptionValue,
    Origin,
    build_combination,
    count_combinations,
    generate_combinations,
    iter_combinations,
)


def test_simple_combinations_come_first_then_composites(forest, catalog):
    combinations = generate_combinations(forest, catalog)

    simple = [c for c in combinations if not c.is_composite]
    composite = [c for c in combinations if c.is_composite]
    assert [c.option_names for c in simple] == [
        ('Couché',), ('Reciclado',), ('250g',), ('Azul',), ('Preto',)
    ]
    assert len(composite) == 4
    assert combinations[:5] == tuple(simple)


def test_two_roots_of_two_and_three_options():
    forest = AttributeForest([AttributeNode('cor', 'Cor'), AttributeNode('tamanho', 'Tamanho')])
    catalog = OptionCatalog(forest, [
        OptionValue('azul', 'cor', 'Azul'),
        OptionValue('preto', 'cor', 'Preto'),
        OptionValue('p', 'tamanho', 'P'),
        OptionValue('m', 'tamanho', 'M'),
        OptionValue('g', 'tamanho', 'G'),
    ])

    combinations = generate_combinations(forest, catalog)

    assert len(combinations) == 11
    assert sum(1 for c in combinations if c.is_composite) == 6
    assert count_combinations(forest, catalog) == 11


def test_composite_aggregates_price_and_scarcest_stock(make_catalog):
    catalog = make_catalog({
        'Cor': [('Azul', '5.00', 10)],
        'Tamanho': [('P', '-2.00', 4)],
    })

    composite = [c for c in generate_combinations(catalog.forest, catalog) if c.is_composite]

    assert len(composite) == 1
    assert composite[0].price_delta == Decimal('3.00')
    assert composite[0].stock == 4


def test_composite_name_and_paths(forest, catalog):
    combination = next(
        c for c in iter_combinations(forest, catalog)
        if c.key == {('tipo', 'reciclado'), ('gramatura', '250g'), ('cor', 'preto')}
    )

    assert combination.name == (
        'Papel > Tipo - Reciclado \\ Papel > Gramatura - 250g \\ Cor - Preto'
    )
    assert combination.attribute_paths == ('Papel > Tipo', 'Papel > Gramatura', 'Cor')
    assert combination.price_delta == Decimal('-0.50')
    assert combination.stock == 4
    assert combination.id == 'auto-cor:preto,gramatura:250g,tipo:reciclado'


def test_generated_combinations_are_inactive_and_automatic(forest, catalog):
    for combination in generate_combinations(forest, catalog):
        assert combination.active is False
        assert combination.modified is False
        assert combination.origin is Origin.AUTOMATIC
        assert combination.storage_id is None
        assert combination.defaults.name == combination.name


def test_generation_is_deterministic(forest, catalog):
    first = generate_combinations(forest, catalog)
    second = generate_combinations(forest, catalog)
    assert [c.id for c in first] == [c.id for c in second]
    assert first == second


def test_keys_are_unique(forest, catalog):
    combinations = generate_combinations(forest, catalog)
    assert len({c.key for c in combinations}) == len(combinations)


def test_ids_with_separator_characters_stay_unique():
    forest = AttributeForest([AttributeNode('r1', 'Um'), AttributeNode('r2', 'Dois')])
    catalog = OptionCatalog(forest, [
        OptionValue('a,b', 'r1', 'AB'),
        OptionValue('a', 'r1', 'A'),
        OptionValue('b:c', 'r2', 'BC'),
    ])

    combinations = generate_combinations(forest, catalog)

    assert len(combinations) == 5
    assert len({c.id for c in combinations}) == 5
    single = next(c for c in combinations if c.key == {('r1', 'a,b')})
    assert single.id == 'auto-r1:a%2Cb'
    assert OptionKey.from_canonical('r1:a%2Cb,r2:b%3Ac') == {('r1', 'a,b'), ('r2', 'b:c')}


def test_single_root_yields_only_simple_combinations():
    forest = AttributeForest([
        AttributeNode('papel', 'Papel'),
        AttributeNode('tipo', 'Tipo', parent_id='papel', depth=1),
        AttributeNode('gramatura', 'Gramatura', parent_id='papel', depth=1),
    ])
    catalog = OptionCatalog(forest, [
        OptionValue('couche', 'tipo', 'Couché'),
        OptionValue('250g', 'gramatura', '250g'),
        OptionValue('300g', 'gramatura', '300g'),
    ])

    combinations = generate_combinations(forest, catalog)

    assert len(combinations) == 3
    assert not any(c.is_composite for c in combinations)
    assert combinations[0].name == 'Papel > Tipo - Couché'
    assert count_combinations(forest, catalog) == 3


def test_subsets_touching_an_empty_leaf_are_skipped(make_catalog):
    catalog = make_catalog({
        'Cor': [('Azul', '0', 1), ('Preto', '0', 1)],
        'Tamanho': [('P', '0', 1)],
        'Acabamento': [],
    })

    combinations = generate_combinations(catalog.forest, catalog)

    assert len(combinations) == 5
    assert all('Acabamento' not in c.name for c in combinations)
    assert count_combinations(catalog.forest, catalog) == 5


def test_inactive_options_are_not_generated(forest):
    catalog = OptionCatalog(forest, [
        OptionValue('couche', 'tipo', 'Couché'),
        OptionValue('250g', 'gramatura', '250g'),
        OptionValue('azul', 'cor', 'Azul'),
        OptionValue('preto', 'cor', 'Preto', active=False),
    ])

    combinations = generate_combinations(forest, catalog)

    assert all(('cor', 'preto') not in c.key for c in combinations)
    assert len(combinations) == count_combinations(forest, catalog) == 4


def test_count_matches_generation(forest, catalog, make_catalog):
    assert count_combinations(forest, catalog) == len(generate_combinations(forest, catalog)) == 9

    wide = make_catalog({
        'Cor': [('Azul', '0', 1), ('Preto', '0', 1)],
        'Tamanho': [('P', '0', 1), ('M', '0', 1), ('G', '0', 1)],
        'Acabamento': [('Fosco', '0', 1), ('Brilho', '0', 1)],
        'Borda': [('Reta', '0', 1)],
    })
    assert count_combinations(wide.forest, wide) == len(generate_combinations(wide.forest, wide))


def test_empty_forest_generates_nothing():
    forest = AttributeForest([])
    catalog = OptionCatalog(forest, [])
    assert generate_combinations(forest, catalog) == ()
    assert count_combinations(forest, catalog) == 0


def test_build_combination_with_custom_separators(forest, catalog):
    combination = build_combination(
        forest,
        [catalog.get(('tipo', 'couche')), catalog.get(('cor', 'azul'))],
        origin=Origin.CUSTOM,
        active=True,
        name_separator=' | ',
        path_separator='/',
    )
    assert combination.name == 'Papel/Tipo - Couché | Cor - Azul'
    assert combination.id == 'custom-cor:azul,tipo:couche'
    assert combination.is_composite
    assert combination.active
