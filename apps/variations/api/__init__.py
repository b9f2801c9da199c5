from .serializers import (
    OptionValueSerializer,
    AttributeNodeSerializer,
    VariationTemplateSerializer,
    VariationTemplateDetailSerializer,
    CombinationSerializer,
    CombinationRecordSerializer,
)

__all__ = [
    'OptionValueSerializer',
    'AttributeNodeSerializer',
    'VariationTemplateSerializer',
    'VariationTemplateDetailSerializer',
    'CombinationSerializer',
    'CombinationRecordSerializer',
]
