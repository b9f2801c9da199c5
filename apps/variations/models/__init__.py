"""
Variation models.

Model Hierarchy:
- VariationTemplate: Scope owning attributes and combinations (e.g., "Cartão de Visita")
- AttributeNode: Hierarchical attributes (Papel > Gramatura, Cor)
- OptionValue: Values of leaf attributes (Couché, 300g, Azul)
- Combination: Stored sellable combination of option values
"""

from .template import VariationTemplate
from .attribute import AttributeNode, OptionValue
from .combination import Combination

__all__ = [
    'VariationTemplate',
    'AttributeNode',
    'OptionValue',
    'Combination',
]
