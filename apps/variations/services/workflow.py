"""
Workflow service tying the engine to its collaborators.

Flow:
    attribute/option source -> generator -> reconciliation (against the
    draft, or the store when there is no draft) -> draft -> activation and
    bulk edits -> save to the store.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional, Tuple

from django.db import transaction

from apps.variations.conf import get_setting
from apps.variations.models import VariationTemplate

from . import activation
from .draft_cache import DraftCache
from .exceptions import CombinationLimitExceeded, PersistenceError
from .generator import count_combinations, iter_combinations
from .reconciliation import ReconciliationResult, reconcile
from .records import Combination, WorkingSet, as_ref
from .repository import CombinationStore, DjangoCombinationStore
from .sources import load_forest


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveResult:
    working_set: WorkingSet
    saved: int
    deleted: int


class VariationWorkflowService:
    """
    Service to generate, edit and save the combinations of a template.
    Every method accepts optional store/draft collaborators; the defaults are
    the Django-backed ones.
    """

    @staticmethod
    def _collaborators(store, draft):
        return store or DjangoCombinationStore(), draft or DraftCache()

    @staticmethod
    def regenerate(
        template: VariationTemplate,
        store: Optional[CombinationStore] = None,
        draft: Optional[DraftCache] = None,
    ) -> ReconciliationResult:
        """
        Generate every combination of the template and reconcile it against
        the draft, or the store when there is no draft.

        Raises:
            InvalidTreeError / CatalogError: the attribute data is invalid
            CombinationLimitExceeded: above the MAX_COMBINATIONS setting
        """
        store, draft = VariationWorkflowService._collaborators(store, draft)
        forest, catalog = load_forest(template)

        limit = get_setting('MAX_COMBINATIONS')
        count = count_combinations(forest, catalog)
        if limit and count > limit:
            raise CombinationLimitExceeded(count, limit)

        if draft.exists(template.pk):
            prior = draft.load_persisted(template.pk)
        else:
            prior = store.load_persisted(template.pk)

        result = reconcile(
            iter_combinations(
                forest,
                catalog,
                name_separator=get_setting('NAME_SEPARATOR'),
                path_separator=get_setting('PATH_SEPARATOR'),
            ),
            prior,
            live_refs=catalog.live_refs(),
        )
        draft.save(template.pk, result.working_set)
        logger.info(
            "Regenerated %d combinations for template %s (%d orphaned)",
            len(result.working_set), template.slug, len(result.orphaned),
        )
        return result

    @staticmethod
    def current_working_set(
        template: VariationTemplate,
        store: Optional[CombinationStore] = None,
        draft: Optional[DraftCache] = None,
    ) -> WorkingSet:
        store, draft = VariationWorkflowService._collaborators(store, draft)
        working_set = draft.load(template.pk)
        if working_set is None:
            working_set = VariationWorkflowService.regenerate(
                template, store=store, draft=draft
            ).working_set
        return working_set

    @staticmethod
    def apply(
        template: VariationTemplate,
        operation: Callable[..., WorkingSet],
        *args,
        store: Optional[CombinationStore] = None,
        draft: Optional[DraftCache] = None,
        **kwargs,
    ) -> WorkingSet:
        """
        Run an activation-layer operation on the current working set and
        keep the result as the new draft.

        Example:
            VariationWorkflowService.apply(template, activation.apply_bulk_price, '9.90')
        """
        store, draft = VariationWorkflowService._collaborators(store, draft)
        working_set = VariationWorkflowService.current_working_set(
            template, store=store, draft=draft
        )
        updated = operation(working_set, *args, **kwargs)
        draft.save(template.pk, updated)
        return updated

    @staticmethod
    def _resolve_refs(catalog, selection) -> list:
        """
        Turn a selection into option refs. Items may already be
        ``(attribute_id, option_id)`` pairs; bare ids must match exactly one
        option of the template, otherwise they resolve to an unknown ref.
        """
        refs = []
        for item in selection:
            if isinstance(item, (list, tuple)):
                refs.append(as_ref(item))
                continue
            matches = catalog.refs_for(item)
            refs.append(matches[0] if len(matches) == 1 else ('', str(item)))
        return refs

    @staticmethod
    def create_custom(
        template: VariationTemplate,
        option_ids: Iterable,
        store: Optional[CombinationStore] = None,
        draft: Optional[DraftCache] = None,
    ) -> activation.Outcome:
        store, draft = VariationWorkflowService._collaborators(store, draft)
        forest, catalog = load_forest(template)
        working_set = VariationWorkflowService.current_working_set(
            template, store=store, draft=draft
        )
        outcome = activation.create_custom(
            working_set,
            forest,
            catalog,
            VariationWorkflowService._resolve_refs(catalog, option_ids),
            name_separator=get_setting('NAME_SEPARATOR'),
            path_separator=get_setting('PATH_SEPARATOR'),
        )
        if outcome.ok:
            draft.save(template.pk, outcome.working_set)
        else:
            logger.info("Custom combination rejected for %s: %s", template.slug, outcome.message)
        return outcome

    @staticmethod
    def remove(
        template: VariationTemplate,
        combination_id: str,
        store: Optional[CombinationStore] = None,
        draft: Optional[DraftCache] = None,
    ) -> Tuple[WorkingSet, Combination]:
        """
        Remove one combination from the draft; stored rows go on the next save.

        Removing an automatic combination lasts until the next regeneration,
        which brings it back inactive while its options are live. Toggle it
        inactive to keep it out of the store for good. Removed custom
        combinations are not regenerated.
        """
        store, draft = VariationWorkflowService._collaborators(store, draft)
        working_set = VariationWorkflowService.current_working_set(
            template, store=store, draft=draft
        )
        updated, removed = activation.remove_combination(working_set, combination_id)
        draft.save(template.pk, updated)
        return updated, removed

    @staticmethod
    def save(
        template: VariationTemplate,
        working_set: Optional[WorkingSet] = None,
        store: Optional[CombinationStore] = None,
        draft: Optional[DraftCache] = None,
    ) -> SaveResult:
        """
        Write the working set to the store.

        Active or modified combinations are upserted; every other stored row
        of the template (deactivated, removed or orphaned) is deleted. All
        writes run in one transaction: on failure PersistenceError propagates
        and neither the draft nor the stored rows change.
        """
        store, draft = VariationWorkflowService._collaborators(store, draft)
        if working_set is None:
            working_set = VariationWorkflowService.current_working_set(
                template, store=store, draft=draft
            )

        keep = [c for c in working_set if c.active or c.modified]
        keep_keys = {c.key for c in keep}
        updates = {}
        deleted = 0

        try:
            with transaction.atomic():
                for stored in store.load_persisted(template.pk):
                    if stored.key not in keep_keys:
                        store.delete(stored.storage_id)
                        deleted += 1
                for combination in keep:
                    storage_id = store.upsert(template.pk, combination)
                    updates[combination.id] = replace(combination, storage_id=storage_id)
        except PersistenceError:
            logger.exception("Saving combinations of %s failed", template.slug)
            raise

        saved_set = WorkingSet(
            updates.get(c.id) or replace(c, storage_id=None)
            for c in working_set
        )
        draft.clear(template.pk)
        logger.info(
            "Saved %d combinations for template %s (%d deleted)",
            len(keep), template.slug, deleted,
        )
        return SaveResult(working_set=saved_set, saved=len(keep), deleted=deleted)

    @staticmethod
    def remove_all(
        template: VariationTemplate,
        store: Optional[CombinationStore] = None,
        draft: Optional[DraftCache] = None,
    ) -> int:
        """Clear the working set and delete every stored combination of the template."""
        store, draft = VariationWorkflowService._collaborators(store, draft)
        working_set = draft.load(template.pk) or WorkingSet()
        _, removed = activation.remove_all(working_set)
        deleted = store.delete_scope(template.pk)
        draft.clear(template.pk)
        logger.info(
            "Removed all combinations of %s (%d drafted, %d stored)",
            template.slug, len(removed), deleted,
        )
        return deleted
