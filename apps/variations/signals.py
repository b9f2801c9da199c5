"""
Django signals for the variations app.
Keeps the stored attribute depth consistent when a node moves in the tree.
"""

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import AttributeNode


logger = logging.getLogger(__name__)


@receiver(post_save, sender=AttributeNode)
def propagate_attribute_depth(sender, instance, raw=False, **kwargs):
    """
    Re-derive the depth of every descendant whose stored depth is stale.
    """
    if raw:
        return

    visited = {instance.pk}
    level = [instance.pk]
    depth = instance.depth + 1
    while level:
        stale = [
            pk for pk in AttributeNode.objects.filter(
                parent_id__in=level
            ).exclude(depth=depth).values_list('pk', flat=True)
            if pk not in visited
        ]
        if not stale:
            break
        AttributeNode.objects.filter(pk__in=stale).update(depth=depth)
        logger.debug("Updated depth of %d attributes to %d", len(stale), depth)
        visited.update(stale)
        level = stale
        depth += 1
