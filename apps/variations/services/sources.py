"""
Attribute/option source: reads a template's forest and options from the ORM
and hands them to the engine as plain records.
"""

from typing import Tuple

from apps.variations.models import AttributeNode as AttributeNodeModel
from apps.variations.models import OptionValue as OptionValueModel
from apps.variations.models import VariationTemplate

from .catalog import OptionCatalog
from .records import AttributeNode, OptionValue
from .tree import AttributeForest


def load_forest(template: VariationTemplate) -> Tuple[AttributeForest, OptionCatalog]:
    """
    Build the attribute forest and option catalog of a template.

    Raises InvalidTreeError / CatalogError when the stored data does not form
    a valid forest.
    """
    attributes = AttributeNodeModel.objects.filter(
        template=template
    ).order_by('display_order', 'name', 'pk')

    forest = AttributeForest(
        AttributeNode(
            id=str(attr.pk),
            name=attr.name,
            parent_id=str(attr.parent_id) if attr.parent_id else None,
            depth=attr.depth,
        )
        for attr in attributes
    )

    options = OptionValueModel.objects.filter(
        attribute__template=template
    ).order_by('display_order', 'name', 'pk')

    catalog = OptionCatalog(forest, (
        OptionValue(
            id=str(opt.pk),
            attribute_id=str(opt.attribute_id),
            name=opt.name,
            price_delta=opt.price_delta,
            stock=opt.stock,
            active=opt.is_active,
            sku=opt.sku or None,
            barcode=opt.barcode or None,
            image_url=opt.image_url or None,
        )
        for opt in options
    ))
    return forest, catalog
