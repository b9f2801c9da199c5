"""
Attribute forest held as an arena of nodes indexed by id.

Parent, children, root and path lookups are precomputed or memoized once,
so generation never re-walks the tree from an id.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .exceptions import (
    DepthMismatchError,
    DuplicateNodeError,
    InvalidTreeError,
    TreeCycleError,
    UnknownParentError,
)
from .records import AttributeNode


PATH_SEPARATOR = ' > '


class AttributeForest:
    """
    Read-only attribute forest.

    Example:
        Papel > Tipo, Papel > Gramatura, Cor
        -> roots: Papel, Cor
        -> leaves: Tipo, Gramatura, Cor

    Raises an ``InvalidTreeError`` subclass when the nodes do not form a
    strict forest (duplicate id, unknown parent, cycle, depth mismatch).
    Nodes with ``children`` must go through ``from_nested``.
    """

    def __init__(self, nodes: Iterable[AttributeNode]):
        self._nodes: Dict[str, AttributeNode] = {}
        self._order: List[str] = []
        for node in nodes:
            node_id = str(node.id)
            if node_id in self._nodes:
                raise DuplicateNodeError(
                    f"Duplicate attribute id {node_id!r}", node_id=node_id
                )
            if node.children:
                raise InvalidTreeError(
                    f"Attribute {node_id!r} carries nested children; "
                    f"use AttributeForest.from_nested for nested nodes",
                    node_id=node_id,
                )
            self._nodes[node_id] = node
            self._order.append(node_id)

        self._parent: Dict[str, Optional[str]] = {}
        self._children: Dict[str, List[str]] = {node_id: [] for node_id in self._order}
        for node_id in self._order:
            parent_id = self._nodes[node_id].parent_id
            parent_id = str(parent_id) if parent_id is not None else None
            if parent_id is not None and parent_id not in self._nodes:
                raise UnknownParentError(
                    f"Attribute {node_id!r} references unknown parent {parent_id!r}",
                    node_id=node_id,
                )
            self._parent[node_id] = parent_id
            if parent_id is not None:
                self._children[parent_id].append(node_id)

        self._check_acyclic()
        self._check_depths()

        self._roots: Tuple[str, ...] = tuple(
            node_id for node_id in self._order if self._parent[node_id] is None
        )
        self._root_cache: Dict[str, str] = {}
        self._path_cache: Dict[str, Tuple[str, ...]] = {}

    @classmethod
    def from_nested(cls, roots: Iterable[AttributeNode]) -> 'AttributeForest':
        """Build a forest from nodes that carry their own ``children``; depth follows nesting."""
        flat = []

        def visit(node, parent_id, depth):
            if parent_id is not None and node.parent_id not in (None, parent_id):
                raise UnknownParentError(
                    f"Attribute {node.id!r} is nested under {parent_id!r} "
                    f"but declares parent {node.parent_id!r}",
                    node_id=str(node.id),
                )
            flat.append(AttributeNode(
                id=str(node.id),
                name=node.name,
                parent_id=parent_id,
                depth=depth,
            ))
            for child in node.children:
                visit(child, str(node.id), depth + 1)

        for root in roots:
            visit(root, None, 0)
        return cls(flat)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _check_acyclic(self):
        # 0 = unvisited, 1 = on the current chain, 2 = known to reach a root
        state: Dict[str, int] = {}
        for start in self._order:
            chain = []
            current = start
            while current is not None and state.get(current, 0) == 0:
                state[current] = 1
                chain.append(current)
                current = self._parent[current]
            if current is not None and state[current] == 1:
                raise TreeCycleError(
                    f"Attribute {current!r} is its own ancestor", node_id=current
                )
            for node_id in chain:
                state[node_id] = 2

    def _check_depths(self):
        for node_id in self._order:
            node = self._nodes[node_id]
            parent_id = self._parent[node_id]
            expected = 0 if parent_id is None else self._nodes[parent_id].depth + 1
            if node.depth != expected:
                raise DepthMismatchError(
                    f"Attribute {node_id!r} has depth {node.depth}, expected {expected}",
                    node_id=node_id,
                )

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def __len__(self):
        return len(self._nodes)

    def __contains__(self, node_id):
        return str(node_id) in self._nodes

    def node(self, node_id: str) -> AttributeNode:
        return self._nodes[str(node_id)]

    def roots(self) -> Tuple[str, ...]:
        return self._roots

    def parent_of(self, node_id: str) -> Optional[str]:
        return self._parent[str(node_id)]

    def children(self, node_id: str) -> Tuple[str, ...]:
        return tuple(self._children[str(node_id)])

    def is_leaf(self, node_id: str) -> bool:
        return not self._children[str(node_id)]

    def leaves(self) -> List[str]:
        """Leaf ids in depth-first order, following the children order."""
        result = []
        stack = list(reversed(self._roots))
        while stack:
            node_id = stack.pop()
            children = self._children[node_id]
            if not children:
                result.append(node_id)
            else:
                stack.extend(reversed(children))
        return result

    def root_of(self, node_id: str) -> str:
        node_id = str(node_id)
        cached = self._root_cache.get(node_id)
        if cached is not None:
            return cached
        parent_id = self._parent[node_id]
        root = node_id if parent_id is None else self.root_of(parent_id)
        self._root_cache[node_id] = root
        return root

    def path_of(self, node_id: str) -> Tuple[str, ...]:
        """Names from the root down to ``node_id``."""
        node_id = str(node_id)
        cached = self._path_cache.get(node_id)
        if cached is not None:
            return cached
        parent_id = self._parent[node_id]
        prefix = () if parent_id is None else self.path_of(parent_id)
        path = prefix + (self._nodes[node_id].name,)
        self._path_cache[node_id] = path
        return path

    def path_label(self, node_id: str, separator: str = PATH_SEPARATOR) -> str:
        return separator.join(self.path_of(node_id))

    def leaves_by_root(self) -> Dict[str, List[str]]:
        """Leaves grouped under their root, both in forest order."""
        groups: Dict[str, List[str]] = {}
        for leaf_id in self.leaves():
            groups.setdefault(self.root_of(leaf_id), []).append(leaf_id)
        return groups
