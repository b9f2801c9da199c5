from dataclasses import replace

from apps.variations.services import (
    Combination,
    Origin,
    generate_combinations,
    iter_combinations,
    reconcile,
)


AZUL = ('cor', 'azul')
VERDE = ('cor', 'verde')
COUCHE = ('tipo', 'couche')


def _by_key(working_set, *refs):
    return working_set.find_by_key(refs)


def test_fresh_generation_against_nothing(forest, catalog):
    result = reconcile(generate_combinations(forest, catalog), [])

    assert len(result.working_set) == 9
    assert result.orphaned == ()
    assert result.stats.added == 9
    assert result.stats.changed
    assert not any(c.active for c in result.working_set)


def test_modified_record_survives_regeneration(forest, catalog):
    generated = generate_combinations(forest, catalog)
    azul = next(c for c in generated if c.key == {AZUL})
    persisted = replace(
        azul, id='7', storage_id=7, name='Custom Name', stock=3, active=True, modified=True
    )

    result = reconcile(generate_combinations(forest, catalog), [persisted])

    kept = _by_key(result.working_set, AZUL)
    assert kept.name == 'Custom Name'
    assert kept.stock == 3
    assert kept.modified
    assert kept.active
    assert kept.storage_id == 7
    assert kept.defaults.name == 'Cor - Azul'
    assert result.stats.preserved == 1


def test_modified_record_gets_fresh_derived_fields(forest, catalog):
    generated = generate_combinations(forest, catalog)
    azul = next(c for c in generated if c.key == {AZUL})
    persisted = replace(azul, storage_id=7, attribute_paths=('Old',), modified=True)

    result = reconcile(generated, [persisted])

    assert _by_key(result.working_set, AZUL).attribute_paths == ('Cor',)


def test_unmodified_record_takes_fresh_values_and_keeps_state(forest, catalog):
    generated = generate_combinations(forest, catalog)
    azul = next(c for c in generated if c.key == {AZUL})
    persisted = replace(azul, id='12', storage_id=12, name='Stale', active=True)

    result = reconcile(generated, [persisted])

    merged = _by_key(result.working_set, AZUL)
    assert merged.name == 'Cor - Azul'
    assert merged.id == '12'
    assert merged.storage_id == 12
    assert merged.active
    assert not merged.modified
    assert result.stats.refreshed == 1


def test_records_are_matched_by_key_not_id(forest, catalog):
    generated = generate_combinations(forest, catalog)
    azul = next(c for c in generated if c.key == {AZUL})
    persisted = replace(azul, id='something-else', storage_id=3, active=True)

    result = reconcile(generated, [persisted])

    assert len(result.working_set) == 9
    assert _by_key(result.working_set, AZUL).active


def test_stored_record_without_counterpart_is_orphaned(forest, catalog):
    gone = Combination(id='9', key=[VERDE], name='Cor - Verde', storage_id=9, active=True)

    result = reconcile(generate_combinations(forest, catalog), [gone])

    assert result.orphaned == (gone,)
    assert VERDE not in {ref for key in result.working_set.keys() for ref in key}
    assert result.stats.orphaned == 1


def test_unstored_record_without_counterpart_is_dropped(forest, catalog):
    gone = Combination(id='auto-cor:verde', key=[VERDE], name='Cor - Verde')

    result = reconcile(generate_combinations(forest, catalog), [gone])

    assert result.orphaned == ()
    assert result.stats.dropped == 1
    assert len(result.working_set) == 9


def test_custom_record_kept_while_its_options_live(forest, catalog):
    custom = Combination(
        id='custom-cor:azul,tipo:couche',
        key=[COUCHE, AZUL],
        name='Papel > Tipo - Couché \\ Cor - Azul',
        active=True,
        origin=Origin.CUSTOM,
    )

    result = reconcile(
        generate_combinations(forest, catalog), [custom],
        live_refs=catalog.live_refs(),
    )

    assert _by_key(result.working_set, COUCHE, AZUL) == custom
    assert result.stats.kept_custom == 1


def test_custom_record_orphaned_when_an_option_disappears(forest, catalog):
    custom = Combination(
        id='4',
        key=[COUCHE, VERDE],
        name='Papel > Tipo - Couché \\ Cor - Verde',
        origin=Origin.CUSTOM,
        storage_id=4,
    )

    result = reconcile(
        generate_combinations(forest, catalog), [custom],
        live_refs=catalog.live_refs(),
    )

    assert result.orphaned == (custom,)


def test_merge_is_idempotent(forest, catalog):
    generated = generate_combinations(forest, catalog)
    azul = next(c for c in generated if c.key == {AZUL})
    custom = Combination(
        id='custom-cor:azul,tipo:couche', key=[COUCHE, AZUL], name='x', origin=Origin.CUSTOM
    )
    first = reconcile(
        generated,
        [replace(azul, storage_id=1, name='Edited', modified=True), custom],
        live_refs=catalog.live_refs(),
    )

    second = reconcile(
        generate_combinations(forest, catalog),
        first.working_set,
        live_refs=catalog.live_refs(),
    )

    assert second.working_set == first.working_set
    assert not second.stats.changed


def test_accepts_a_lazy_generator(forest, catalog):
    result = reconcile(iter_combinations(forest, catalog), [])
    assert len(result.working_set) == 9
