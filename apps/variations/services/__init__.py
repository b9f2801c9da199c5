from .exceptions import (
    VariationError,
    InvalidTreeError,
    DuplicateNodeError,
    UnknownParentError,
    TreeCycleError,
    DepthMismatchError,
    CatalogError,
    CombinationLimitExceeded,
    CombinationNotFound,
    DuplicateCombinationError,
    PersistenceError,
)
from .records import (
    AttributeNode,
    OptionValue,
    OptionKey,
    Origin,
    Combination,
    CombinationDefaults,
    WorkingSet,
)
from .tree import AttributeForest
from .catalog import OptionCatalog
from .generator import build_combination, iter_combinations, generate_combinations, count_combinations
from .reconciliation import ReconciliationResult, ReconciliationStats, reconcile
from .activation import Outcome, OutcomeReason
from .workflow import VariationWorkflowService, SaveResult

__all__ = [
    'VariationError',
    'InvalidTreeError',
    'DuplicateNodeError',
    'UnknownParentError',
    'TreeCycleError',
    'DepthMismatchError',
    'CatalogError',
    'CombinationLimitExceeded',
    'CombinationNotFound',
    'DuplicateCombinationError',
    'PersistenceError',
    'AttributeNode',
    'OptionValue',
    'OptionKey',
    'Origin',
    'Combination',
    'CombinationDefaults',
    'WorkingSet',
    'AttributeForest',
    'OptionCatalog',
    'build_combination',
    'iter_combinations',
    'generate_combinations',
    'count_combinations',
    'ReconciliationResult',
    'ReconciliationStats',
    'reconcile',
    'Outcome',
    'OutcomeReason',
    'VariationWorkflowService',
    'SaveResult',
]
