"""
Option catalog: the ordered option values of each leaf attribute.

Option ids only need to be unique within their leaf, so options are
addressed by their ``(attribute_id, option_id)`` ref.
"""

from typing import Dict, FrozenSet, Iterable, List, Tuple

from .exceptions import CatalogError
from .records import OptionValue, as_ref
from .tree import AttributeForest


class OptionCatalog:
    """
    Per-leaf option lists, validated against an attribute forest.

    Options keep the order they were given in; inactive options are kept
    but excluded from ``active_options``.
    """

    def __init__(self, forest: AttributeForest, options: Iterable[OptionValue]):
        self._forest = forest
        self._options: Dict[Tuple[str, str], OptionValue] = {}
        self._by_attribute: Dict[str, List[OptionValue]] = {}

        for option in options:
            attribute_id, option_id = option.ref
            if option.ref in self._options:
                raise CatalogError(
                    f"Duplicate option id {option_id!r} in attribute {attribute_id!r}",
                    option_id=option_id,
                )
            if attribute_id not in forest:
                raise CatalogError(
                    f"Option {option_id!r} belongs to unknown attribute {attribute_id!r}",
                    option_id=option_id,
                )
            if not forest.is_leaf(attribute_id):
                raise CatalogError(
                    f"Option {option_id!r} belongs to {forest.path_label(attribute_id)!r}, "
                    f"which has sub-attributes; only leaf attributes own options",
                    option_id=option_id,
                )
            if option.stock < 0:
                raise CatalogError(
                    f"Option {option_id!r} has negative stock {option.stock}",
                    option_id=option_id,
                )
            self._options[option.ref] = option
            self._by_attribute.setdefault(attribute_id, []).append(option)

    def __len__(self):
        return len(self._options)

    def __contains__(self, ref):
        return as_ref(ref) in self._options

    @property
    def forest(self) -> AttributeForest:
        return self._forest

    def get(self, ref) -> OptionValue:
        return self._options[as_ref(ref)]

    def refs_for(self, option_id: str) -> List[Tuple[str, str]]:
        """Refs of every option with this id, across all leaves."""
        option_id = str(option_id)
        return [ref for ref in self._options if ref[1] == option_id]

    def options_for(self, leaf_id: str) -> List[OptionValue]:
        return list(self._by_attribute.get(str(leaf_id), ()))

    def active_options(self, leaf_id: str) -> List[OptionValue]:
        return [o for o in self._by_attribute.get(str(leaf_id), ()) if o.active]

    def live_refs(self) -> FrozenSet[Tuple[str, str]]:
        return frozenset(ref for ref, option in self._options.items() if option.active)
