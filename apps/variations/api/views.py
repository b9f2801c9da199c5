from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.variations.models import VariationTemplate, Combination
from apps.variations.services import (
    VariationWorkflowService,
    OutcomeReason,
    InvalidTreeError,
    CatalogError,
    CombinationLimitExceeded,
    CombinationNotFound,
    PersistenceError,
)
from apps.variations.services import activation
from .serializers import (
    VariationTemplateSerializer,
    VariationTemplateDetailSerializer,
    CombinationSerializer,
    CombinationRecordSerializer,
    WorkingSetViewSerializer,
    CombinationIdSerializer,
    ActivateAllSerializer,
    BulkPriceSerializer,
    BulkStockSerializer,
    CombinationEditSerializer,
    CustomCombinationSerializer,
)
from .filters import CombinationFilter


OUTCOME_STATUS = {
    OutcomeReason.CREATED: status.HTTP_201_CREATED,
    OutcomeReason.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
}


def working_set_payload(template, working_set, view='all', **extra):
    combinations = working_set.view(view)
    payload = {
        'template': template.slug,
        'view': view,
        'count': len(combinations),
        'total': len(working_set),
        'active_count': len(working_set.active()),
        'combinations': CombinationRecordSerializer(combinations, many=True).data,
    }
    payload.update(extra)
    return payload


class VariationTemplateViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for variation templates and their working set.

    list: List all templates
    retrieve: Get template detail with its attribute tree
    combinations: Generate and reconcile combinations (?view=all|simple|composite|active)
    save: Persist the working set
    """
    queryset = VariationTemplate.objects.all()
    lookup_field = 'slug'
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return VariationTemplateDetailSerializer
        return VariationTemplateSerializer

    def handle_exception(self, exc):
        if isinstance(exc, CombinationNotFound):
            return Response({'error': str(exc)}, status=status.HTTP_404_NOT_FOUND)
        if isinstance(exc, (InvalidTreeError, CatalogError, CombinationLimitExceeded)):
            return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, PersistenceError):
            return Response({'error': str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        return super().handle_exception(exc)

    def _validated(self, serializer_class, data):
        serializer = serializer_class(data=data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['get'])
    def combinations(self, request, slug=None):
        """
        Regenerate combinations and merge them with the draft or stored ones.
        """
        template = self.get_object()
        view = self._validated(WorkingSetViewSerializer, request.query_params)['view']
        result = VariationWorkflowService.regenerate(template)
        stats = result.stats
        return Response(working_set_payload(
            template,
            result.working_set,
            view,
            orphaned=CombinationRecordSerializer(result.orphaned, many=True).data,
            stats={
                'added': stats.added,
                'refreshed': stats.refreshed,
                'preserved': stats.preserved,
                'kept_custom': stats.kept_custom,
                'orphaned': stats.orphaned,
                'dropped': stats.dropped,
            },
        ))

    # -------------------------------------------------------------------------
    # Activation and bulk edits
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['post'])
    def toggle(self, request, slug=None):
        template = self.get_object()
        data = self._validated(CombinationIdSerializer, request.data)
        working_set = VariationWorkflowService.apply(
            template, activation.toggle_active, data['combination_id']
        )
        return Response(working_set_payload(template, working_set))

    @action(detail=True, methods=['post'], url_path='activate-all')
    def activate_all(self, request, slug=None):
        template = self.get_object()
        data = self._validated(ActivateAllSerializer, request.data)
        working_set = VariationWorkflowService.apply(
            template, activation.set_all_active, data['active']
        )
        return Response(working_set_payload(template, working_set))

    @action(detail=True, methods=['post'], url_path='bulk-price')
    def bulk_price(self, request, slug=None):
        """
        Set the price delta of every active combination.

        Expected payload: {"value": "12.50"}
        """
        template = self.get_object()
        data = self._validated(BulkPriceSerializer, request.data)
        working_set = VariationWorkflowService.apply(
            template, activation.apply_bulk_price, data['value']
        )
        return Response(working_set_payload(template, working_set))

    @action(detail=True, methods=['post'], url_path='bulk-stock')
    def bulk_stock(self, request, slug=None):
        """
        Set the stock of every active combination.

        Expected payload: {"value": 10}
        """
        template = self.get_object()
        data = self._validated(BulkStockSerializer, request.data)
        working_set = VariationWorkflowService.apply(
            template, activation.apply_bulk_stock, data['value']
        )
        return Response(working_set_payload(template, working_set))

    @action(detail=True, methods=['post'])
    def edit(self, request, slug=None):
        template = self.get_object()
        data = dict(self._validated(CombinationEditSerializer, request.data))
        combination_id = data.pop('combination_id')
        working_set = VariationWorkflowService.apply(
            template, activation.edit_combination, combination_id, **data
        )
        return Response(working_set_payload(template, working_set))

    @action(detail=True, methods=['post'])
    def restore(self, request, slug=None):
        template = self.get_object()
        data = self._validated(CombinationIdSerializer, request.data)
        working_set = VariationWorkflowService.apply(
            template, activation.restore_defaults, data['combination_id']
        )
        return Response(working_set_payload(template, working_set))

    @action(detail=True, methods=['post'], url_path='reset-inactive')
    def reset_inactive(self, request, slug=None):
        template = self.get_object()
        working_set = VariationWorkflowService.apply(template, activation.reset_inactive)
        return Response(working_set_payload(template, working_set))

    # -------------------------------------------------------------------------
    # Custom combinations and removal
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['post'])
    def custom(self, request, slug=None):
        """
        Create a combination from hand-picked option values.

        Expected payload: {"option_ids": ["3", "7"]}
        """
        template = self.get_object()
        data = self._validated(CustomCombinationSerializer, request.data)
        outcome = VariationWorkflowService.create_custom(template, data['option_ids'])
        payload = working_set_payload(
            template,
            outcome.working_set,
            reason=outcome.reason.value,
            message=outcome.message,
            combination=(
                CombinationRecordSerializer(outcome.combination).data
                if outcome.combination is not None else None
            ),
        )
        return Response(
            payload,
            status=OUTCOME_STATUS.get(outcome.reason, status.HTTP_400_BAD_REQUEST)
        )

    @action(detail=True, methods=['post'])
    def remove(self, request, slug=None):
        template = self.get_object()
        data = self._validated(CombinationIdSerializer, request.data)
        working_set, removed = VariationWorkflowService.remove(
            template, data['combination_id']
        )
        return Response(working_set_payload(
            template, working_set,
            removed=CombinationRecordSerializer(removed).data,
        ))

    @action(detail=True, methods=['post'], url_path='remove-all')
    def remove_all(self, request, slug=None):
        template = self.get_object()
        deleted = VariationWorkflowService.remove_all(template)
        return Response({'template': template.slug, 'deleted': deleted})

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['post'])
    def save(self, request, slug=None):
        template = self.get_object()
        result = VariationWorkflowService.save(template)
        return Response(working_set_payload(
            template, result.working_set,
            saved=result.saved,
            deleted=result.deleted,
        ))


class CombinationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for stored combinations.

    Supports filtering by template, status, origin, price range, stock status.
    """
    queryset = Combination.objects.select_related('template').prefetch_related('options')
    serializer_class = CombinationSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = CombinationFilter
    search_fields = ['name', 'sku', 'barcode', 'template__name']
    ordering_fields = ['name', 'price_delta', 'stock', 'created_at']
    ordering = ['template', 'is_composite', 'name']
