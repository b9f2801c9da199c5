from rest_framework import serializers

from apps.variations.models import (
    VariationTemplate,
    AttributeNode,
    OptionValue,
    Combination,
)
from apps.variations.services.records import VIEWS


# =============================================================================
# Attribute Serializers
# =============================================================================

class OptionValueSerializer(serializers.ModelSerializer):
    attribute_path = serializers.CharField(
        source='attribute.full_path', read_only=True
    )

    class Meta:
        model = OptionValue
        fields = [
            'id', 'attribute', 'attribute_path', 'name', 'sku', 'barcode',
            'image_url', 'price_delta', 'stock', 'is_active', 'display_order'
        ]


class AttributeNodeSerializer(serializers.ModelSerializer):
    options = OptionValueSerializer(many=True, read_only=True)
    full_path = serializers.CharField(read_only=True)
    is_leaf = serializers.BooleanField(read_only=True)

    class Meta:
        model = AttributeNode
        fields = [
            'id', 'name', 'parent', 'depth', 'full_path', 'is_leaf',
            'display_order', 'options'
        ]


# =============================================================================
# Template Serializers
# =============================================================================

class VariationTemplateSerializer(serializers.ModelSerializer):
    combination_count = serializers.IntegerField(read_only=True)
    active_combination_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = VariationTemplate
        fields = [
            'id', 'name', 'slug', 'description', 'is_active',
            'combination_count', 'active_combination_count',
            'created_at', 'updated_at'
        ]


class VariationTemplateDetailSerializer(VariationTemplateSerializer):
    attributes = serializers.SerializerMethodField()

    class Meta(VariationTemplateSerializer.Meta):
        fields = VariationTemplateSerializer.Meta.fields + ['attributes']

    def get_attributes(self, obj):
        attributes = obj.attributes.prefetch_related('options').select_related('parent')
        return AttributeNodeSerializer(attributes, many=True).data


# =============================================================================
# Combination Serializers
# =============================================================================

class CombinationSerializer(serializers.ModelSerializer):
    """Stored combination."""
    template_slug = serializers.CharField(source='template.slug', read_only=True)
    option_ids = serializers.SerializerMethodField()
    is_in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Combination
        fields = [
            'id', 'template', 'template_slug', 'option_key', 'option_ids',
            'attribute_paths', 'option_names', 'is_composite',
            'name', 'sku', 'barcode', 'price_delta', 'stock', 'is_in_stock',
            'notes', 'is_active', 'origin', 'is_modified',
            'created_at', 'updated_at'
        ]

    def get_option_ids(self, obj):
        return obj.get_option_ids()


class CombinationRecordSerializer(serializers.Serializer):
    """Working-set combination (engine record, not a model instance)."""
    id = serializers.CharField()
    key = serializers.SerializerMethodField()
    name = serializers.CharField()
    attribute_paths = serializers.ListField(child=serializers.CharField())
    option_names = serializers.ListField(child=serializers.CharField())
    is_composite = serializers.BooleanField()
    sku = serializers.CharField()
    barcode = serializers.CharField()
    price_delta = serializers.DecimalField(max_digits=10, decimal_places=2)
    stock = serializers.IntegerField()
    notes = serializers.CharField()
    active = serializers.BooleanField()
    origin = serializers.SerializerMethodField()
    modified = serializers.BooleanField()
    persisted = serializers.BooleanField()
    storage_id = serializers.IntegerField(allow_null=True)

    def get_key(self, obj):
        return [
            {'attribute': attribute_id, 'option': option_id}
            for attribute_id, option_id in sorted(obj.key)
        ]

    def get_origin(self, obj):
        return obj.origin.value


# =============================================================================
# Working-set action payloads
# =============================================================================

class WorkingSetViewSerializer(serializers.Serializer):
    view = serializers.ChoiceField(choices=VIEWS, default='all')


class CombinationIdSerializer(serializers.Serializer):
    combination_id = serializers.CharField()


class ActivateAllSerializer(serializers.Serializer):
    active = serializers.BooleanField()


class BulkPriceSerializer(serializers.Serializer):
    value = serializers.DecimalField(max_digits=10, decimal_places=2)


class BulkStockSerializer(serializers.Serializer):
    value = serializers.IntegerField(min_value=0)


class CombinationEditSerializer(serializers.Serializer):
    combination_id = serializers.CharField()
    name = serializers.CharField(required=False, max_length=500)
    sku = serializers.CharField(required=False, allow_blank=True, max_length=100)
    barcode = serializers.CharField(required=False, allow_blank=True, max_length=100)
    price_delta = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    stock = serializers.IntegerField(min_value=0, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class CustomCombinationSerializer(serializers.Serializer):
    option_ids = serializers.ListField(
        child=serializers.CharField(), allow_empty=True
    )
