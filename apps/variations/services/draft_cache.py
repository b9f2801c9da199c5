"""
Draft cache: keeps the working set of a template between requests until it
is explicitly saved.
"""

import logging
from typing import List, Optional

from django.core.cache import caches

from apps.variations.conf import get_setting

from .records import Combination, WorkingSet


logger = logging.getLogger(__name__)


class DraftCache:
    """
    Write-through cache keyed by template, holding combinations as plain dicts.

    For reconciliation it behaves like another persistence collaborator:
    ``load_persisted`` returns the drafted records.
    """

    def __init__(self, cache=None, prefix: Optional[str] = None, timeout: Optional[int] = None):
        self.cache = cache if cache is not None else caches[get_setting('DRAFT_CACHE_ALIAS')]
        self.prefix = prefix or get_setting('DRAFT_CACHE_PREFIX')
        self.timeout = timeout if timeout is not None else get_setting('DRAFT_CACHE_TIMEOUT')

    def key(self, scope_id) -> str:
        return f"{self.prefix}:{scope_id}"

    def exists(self, scope_id) -> bool:
        return self.cache.get(self.key(scope_id)) is not None

    def load_persisted(self, scope_id) -> List[Combination]:
        data = self.cache.get(self.key(scope_id)) or []
        return [Combination.from_dict(item) for item in data]

    def load(self, scope_id) -> Optional[WorkingSet]:
        data = self.cache.get(self.key(scope_id))
        if data is None:
            return None
        return WorkingSet.from_list(data)

    def save(self, scope_id, working_set: WorkingSet) -> None:
        self.cache.set(self.key(scope_id), working_set.to_list(), self.timeout)
        logger.debug("Draft for %s saved with %d combinations", scope_id, len(working_set))

    def clear(self, scope_id) -> None:
        self.cache.delete(self.key(scope_id))
