"""
Combination generator.

Turns an attribute forest and its option catalog into every simple
combination (one option of one leaf) and every composite combination
(cartesian product across 2..N distinct root attributes).

Example, roots Papel (leaves Tipo, Gramatura) and Cor:
    simple:    each option of Tipo, of Gramatura and of Cor
    composite: Tipo x Gramatura x Cor
"""

import itertools
import logging
from decimal import Decimal
from typing import Iterator, List, Sequence, Tuple

from .catalog import OptionCatalog
from .records import Combination, OptionKey, OptionValue, Origin
from .tree import PATH_SEPARATOR, AttributeForest


logger = logging.getLogger(__name__)

NAME_SEPARATOR = ' \\ '
OPTION_LABEL = '{path} - {option}'


def build_combination(
    forest: AttributeForest,
    options: Sequence[OptionValue],
    origin: Origin = Origin.AUTOMATIC,
    active: bool = False,
    name_separator: str = NAME_SEPARATOR,
    path_separator: str = PATH_SEPARATOR,
) -> Combination:
    """
    Build one combination record from the selected options.

    price_delta is the sum of the option deltas; stock is the lowest
    option stock.
    """
    paths = tuple(forest.path_label(o.attribute_id, path_separator) for o in options)
    names = tuple(o.name for o in options)
    roots = {forest.root_of(o.attribute_id) for o in options}
    key = OptionKey(o.ref for o in options)

    prefix = 'auto' if Origin(origin) is Origin.AUTOMATIC else 'custom'
    return Combination(
        id=f"{prefix}-{key.canonical()}",
        key=key,
        name=name_separator.join(
            OPTION_LABEL.format(path=path, option=name)
            for path, name in zip(paths, names)
        ),
        price_delta=sum((o.price_delta for o in options), Decimal('0')),
        stock=min((o.stock for o in options), default=0),
        attribute_paths=paths,
        option_names=names,
        is_composite=len(roots) > 1,
        active=active,
        origin=origin,
    )


def _option_tuples(
    forest: AttributeForest, catalog: OptionCatalog
) -> Iterator[Tuple[OptionValue, ...]]:
    groups = forest.leaves_by_root()
    roots = list(groups)

    # Simple combinations. With more than one root they precede the
    # composites; with a single root they are the whole enumeration.
    if roots:
        for leaf_id in forest.leaves():
            for option in catalog.active_options(leaf_id):
                yield (option,)

    for size in range(2, len(roots) + 1):
        for subset in itertools.combinations(roots, size):
            option_lists = [
                catalog.active_options(leaf_id)
                for root_id in subset
                for leaf_id in groups[root_id]
            ]
            if not all(option_lists):
                continue
            yield from itertools.product(*option_lists)


def iter_combinations(
    forest: AttributeForest,
    catalog: OptionCatalog,
    name_separator: str = NAME_SEPARATOR,
    path_separator: str = PATH_SEPARATOR,
) -> Iterator[Combination]:
    """
    Lazily yield every combination, without duplicates.

    Subsets of roots and their cartesian products are enumerated on demand;
    only the keys already emitted are kept in memory.
    """
    seen = set()
    for options in _option_tuples(forest, catalog):
        combination = build_combination(
            forest,
            options,
            name_separator=name_separator,
            path_separator=path_separator,
        )
        if combination.key in seen:
            continue
        seen.add(combination.key)
        yield combination


def generate_combinations(
    forest: AttributeForest,
    catalog: OptionCatalog,
    name_separator: str = NAME_SEPARATOR,
    path_separator: str = PATH_SEPARATOR,
) -> Tuple[Combination, ...]:
    combinations = tuple(iter_combinations(
        forest, catalog, name_separator=name_separator, path_separator=path_separator
    ))
    logger.debug(
        "Generated %d combinations (%d composite) from %d attributes",
        len(combinations),
        sum(1 for c in combinations if c.is_composite),
        len(forest),
    )
    return combinations


def count_combinations(forest: AttributeForest, catalog: OptionCatalog) -> int:
    """
    Number of combinations ``iter_combinations`` would yield, from option
    counts alone.

    Composite count is the sum, over every k-subset of roots (k >= 2), of the
    product of the per-root tuple counts; it is accumulated as elementary
    symmetric sums so no subset is ever enumerated.
    """
    groups = forest.leaves_by_root()
    if not groups:
        return 0

    simple = sum(len(catalog.active_options(leaf_id)) for leaf_id in forest.leaves())

    per_root: List[int] = []
    for leaf_ids in groups.values():
        count = 1
        for leaf_id in leaf_ids:
            count *= len(catalog.active_options(leaf_id))
        per_root.append(count)

    # sums[k] = sum over k-subsets of the product of their counts
    sums = [1] + [0] * len(per_root)
    for count in per_root:
        for k in range(len(per_root), 0, -1):
            sums[k] += sums[k - 1] * count

    return simple + sum(sums[2:])

