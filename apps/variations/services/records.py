"""
Plain data records shared by the variation engine.

These records never touch the ORM: the generator, the reconciler and the
activation layer work on them, and the persistence collaborators convert
them to and from storage rows.

Records are immutable. Every change produces a new record (see
``dataclasses.replace``), so a working set handed to a caller is never
mutated behind its back.
"""

from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
from urllib.parse import quote, unquote

from .exceptions import CombinationNotFound, DuplicateCombinationError


EDITABLE_FIELDS = ('name', 'sku', 'barcode', 'price_delta', 'stock', 'notes')

VIEW_ALL = 'all'
VIEW_SIMPLE = 'simple'
VIEW_COMPOSITE = 'composite'
VIEW_ACTIVE = 'active'
VIEWS = (VIEW_ALL, VIEW_SIMPLE, VIEW_COMPOSITE, VIEW_ACTIVE)


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class Origin(str, Enum):
    AUTOMATIC = 'automatic'
    CUSTOM = 'custom'


# =============================================================================
# Attributes and options
# =============================================================================

@dataclass(frozen=True)
class AttributeNode:
    """
    One attribute of the variation forest.

    A forest can be described flat (nodes linked by ``parent_id``) or nested
    (nodes listed in ``children``); ``AttributeForest`` accepts both.
    """
    id: str
    name: str
    parent_id: Optional[str] = None
    depth: int = 0
    children: Tuple['AttributeNode', ...] = ()


@dataclass(frozen=True)
class OptionValue:
    """A selectable value of a leaf attribute."""
    id: str
    attribute_id: str
    name: str
    price_delta: Decimal = Decimal('0')
    stock: int = 0
    active: bool = True
    sku: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'price_delta', to_decimal(self.price_delta))

    @property
    def ref(self) -> Tuple[str, str]:
        """Identity of the option: option ids are only unique within their leaf."""
        return (str(self.attribute_id), str(self.id))


def as_ref(value) -> Tuple[str, str]:
    attribute_id, option_id = value
    return (str(attribute_id), str(option_id))


class OptionKey(frozenset):
    """
    Order-independent identity of a combination: the set of selected options,
    each one given as an ``(attribute_id, option_id)`` ref.

    Equality and hashing are those of ``frozenset``; ``canonical()`` gives the
    sorted string form used as a storage column and as the suffix of
    combination ids. Both parts of a ref are percent-encoded there, so ids
    containing the separators cannot make two keys collide.
    """
    SEPARATOR = ','
    REF_SEPARATOR = ':'

    def __new__(cls, refs=()):
        return super().__new__(cls, (as_ref(ref) for ref in refs))

    @classmethod
    def _encode(cls, ref) -> str:
        return cls.REF_SEPARATOR.join(quote(part, safe='') for part in ref)

    def canonical(self) -> str:
        return self.SEPARATOR.join(sorted(self._encode(ref) for ref in self))

    @classmethod
    def from_canonical(cls, value: str) -> 'OptionKey':
        refs = []
        for token in value.split(cls.SEPARATOR):
            if not token:
                continue
            attribute_id, _, option_id = token.partition(cls.REF_SEPARATOR)
            refs.append((unquote(attribute_id), unquote(option_id)))
        return cls(refs)

    def option_ids(self) -> List[str]:
        return sorted(option_id for _, option_id in self)

    def attribute_ids(self) -> List[str]:
        return sorted(attribute_id for attribute_id, _ in self)

    def to_list(self) -> List[List[str]]:
        return [list(ref) for ref in sorted(self)]

    def __repr__(self):
        return f"OptionKey({self.canonical()!r})"


# =============================================================================
# Combinations
# =============================================================================

@dataclass(frozen=True)
class CombinationDefaults:
    """Generation-time values of the editable fields."""
    name: str
    sku: str = ''
    barcode: str = ''
    price_delta: Decimal = Decimal('0')
    stock: int = 0
    notes: str = ''

    def __post_init__(self):
        object.__setattr__(self, 'price_delta', to_decimal(self.price_delta))

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}


@dataclass(frozen=True)
class Combination:
    """
    A sellable variation record.

    ``key`` is the true identity; ``id`` only addresses the record inside a
    working set. ``modified`` protects the editable fields from being
    overwritten by regeneration.
    """
    id: str
    key: OptionKey
    name: str
    price_delta: Decimal = Decimal('0')
    stock: int = 0
    attribute_paths: Tuple[str, ...] = ()
    option_names: Tuple[str, ...] = ()
    is_composite: bool = False
    sku: str = ''
    barcode: str = ''
    notes: str = ''
    active: bool = False
    origin: Origin = Origin.AUTOMATIC
    modified: bool = False
    storage_id: Optional[int] = None
    defaults: Optional[CombinationDefaults] = field(default=None, compare=True)

    def __post_init__(self):
        if not isinstance(self.key, OptionKey):
            object.__setattr__(self, 'key', OptionKey(self.key))
        object.__setattr__(self, 'price_delta', to_decimal(self.price_delta))
        object.__setattr__(self, 'origin', Origin(self.origin))
        object.__setattr__(self, 'attribute_paths', tuple(self.attribute_paths))
        object.__setattr__(self, 'option_names', tuple(self.option_names))
        if self.defaults is None:
            object.__setattr__(self, 'defaults', CombinationDefaults(
                **{name: getattr(self, name) for name in EDITABLE_FIELDS}
            ))

    @property
    def selected_option_ids(self) -> OptionKey:
        return self.key

    @property
    def persisted(self) -> bool:
        return self.storage_id is not None

    def editable_values(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}

    def diverges_from_defaults(self) -> bool:
        return self.editable_values() != self.defaults.as_dict()

    def with_defaults_restored(self) -> 'Combination':
        return replace(self, modified=False, **self.defaults.as_dict())

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation, used by the draft cache and the API."""
        return {
            'id': self.id,
            'key': self.key.to_list(),
            'name': self.name,
            'price_delta': str(self.price_delta),
            'stock': self.stock,
            'attribute_paths': list(self.attribute_paths),
            'option_names': list(self.option_names),
            'is_composite': self.is_composite,
            'sku': self.sku,
            'barcode': self.barcode,
            'notes': self.notes,
            'active': self.active,
            'origin': self.origin.value,
            'modified': self.modified,
            'persisted': self.persisted,
            'storage_id': self.storage_id,
            'defaults': {
                name: str(value) if name == 'price_delta' else value
                for name, value in self.defaults.as_dict().items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Combination':
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        defaults = values.pop('defaults', None)
        if defaults is not None:
            values['defaults'] = CombinationDefaults(**defaults)
        values['key'] = OptionKey(values.get('key', ()))
        return cls(**values)


class WorkingSet:
    """
    Ordered, immutable collection of combinations.

    Keys are unique: when two records share a key the later one is dropped.
    Ids are unique too; two records with the same id but different keys are
    rejected with ``DuplicateCombinationError``.
    """

    def __init__(self, combinations: Iterable[Combination] = ()):
        items = []
        by_key = {}
        by_id = {}
        for combination in combinations:
            if combination.key in by_key:
                continue
            if combination.id in by_id:
                raise DuplicateCombinationError(
                    combination.id, by_id[combination.id].key, combination.key
                )
            by_key[combination.key] = combination
            by_id[combination.id] = combination
            items.append(combination)
        self._items: Tuple[Combination, ...] = tuple(items)
        self._by_key: Dict[OptionKey, Combination] = by_key
        self._by_id: Dict[str, Combination] = by_id

    def __iter__(self) -> Iterator[Combination]:
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __contains__(self, combination_id):
        return combination_id in self._by_id

    def __eq__(self, other):
        if not isinstance(other, WorkingSet):
            return NotImplemented
        return self._items == other._items

    def __repr__(self):
        return f"<WorkingSet: {len(self._items)} combinations>"

    def get(self, combination_id: str) -> Combination:
        try:
            return self._by_id[combination_id]
        except KeyError:
            raise CombinationNotFound(combination_id) from None

    def find_by_key(self, key) -> Optional[Combination]:
        return self._by_key.get(OptionKey(key))

    def has_key(self, key) -> bool:
        return OptionKey(key) in self._by_key

    def keys(self) -> frozenset:
        return frozenset(self._by_key)

    def replaced(self, updates: Dict[str, Combination]) -> 'WorkingSet':
        """Return a copy where the records whose id is in ``updates`` are swapped."""
        return WorkingSet(updates.get(c.id, c) for c in self._items)

    def with_added(self, combination: Combination) -> 'WorkingSet':
        return WorkingSet(self._items + (combination,))

    def without(self, combination_id: str) -> 'WorkingSet':
        self.get(combination_id)
        return WorkingSet(c for c in self._items if c.id != combination_id)

    def active(self) -> List[Combination]:
        return [c for c in self._items if c.active]

    def simple(self) -> List[Combination]:
        return [c for c in self._items if not c.is_composite]

    def composite(self) -> List[Combination]:
        return [c for c in self._items if c.is_composite]

    def modified(self) -> List[Combination]:
        return [c for c in self._items if c.modified]

    def view(self, name: str) -> List[Combination]:
        if name == VIEW_ALL:
            return list(self._items)
        if name == VIEW_SIMPLE:
            return self.simple()
        if name == VIEW_COMPOSITE:
            return self.composite()
        if name == VIEW_ACTIVE:
            return self.active()
        raise ValueError(f"Unknown view {name!r}; expected one of {', '.join(VIEWS)}")

    def to_list(self) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in self._items]

    @classmethod
    def from_list(cls, data: Iterable[Dict[str, Any]]) -> 'WorkingSet':
        return cls(Combination.from_dict(item) for item in data)
