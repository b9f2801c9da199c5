"""
Exceptions raised by the variation engine.

Expected conditions (duplicate combination, empty selection) are returned as
Outcome values by the activation layer and never raised.
"""


class VariationError(Exception):
    """Base exception for variation operations."""
    pass


# =============================================================================
# Attribute tree
# =============================================================================

class InvalidTreeError(VariationError):
    """The attribute forest is structurally invalid; nothing is generated."""

    def __init__(self, message, node_id=None):
        super().__init__(message)
        self.node_id = node_id


class DuplicateNodeError(InvalidTreeError):
    pass


class UnknownParentError(InvalidTreeError):
    pass


class TreeCycleError(InvalidTreeError):
    pass


class DepthMismatchError(InvalidTreeError):
    pass


# =============================================================================
# Options and combinations
# =============================================================================

class CatalogError(VariationError):
    """An option value does not fit the attribute forest."""

    def __init__(self, message, option_id=None):
        super().__init__(message)
        self.option_id = option_id


class CombinationLimitExceeded(VariationError):
    """Generation would exceed the configured combination ceiling."""

    def __init__(self, count, limit):
        super().__init__(
            f"Generation would produce {count} combinations (limit {limit})"
        )
        self.count = count
        self.limit = limit


class CombinationNotFound(VariationError, KeyError):
    """No combination with the given id exists in the working set."""

    def __init__(self, combination_id):
        super().__init__(combination_id)
        self.combination_id = combination_id

    def __str__(self):
        return f"Combination {self.combination_id!r} not found"


class DuplicateCombinationError(VariationError, ValueError):
    """Two different combinations claim the same id in one working set."""

    def __init__(self, combination_id, first_key, second_key):
        super().__init__(
            f"Combination id {combination_id!r} is used by both "
            f"{first_key!r} and {second_key!r}"
        )
        self.combination_id = combination_id


class PersistenceError(VariationError):
    """The persistence collaborator failed; the original error is chained."""
    pass
