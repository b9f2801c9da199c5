from django.contrib import admin
from django.utils.html import format_html
from import_export import resources, fields
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget
from adminsortable2.admin import SortableAdminMixin, SortableAdminBase, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .models import (
    VariationTemplate,
    AttributeNode,
    OptionValue,
    Combination,
)
from .services import (
    VariationWorkflowService,
    VariationError,
)


# =============================================================================
# Import/Export Resources
# =============================================================================

class OptionValueResource(resources.ModelResource):
    """Resource for importing/exporting option values."""

    attribute_id = fields.Field(
        column_name='attribute',
        attribute='attribute',
        widget=ForeignKeyWidget(AttributeNode, 'pk')
    )

    class Meta:
        model = OptionValue
        import_id_fields = ['attribute_id', 'name']
        fields = (
            'attribute_id', 'name', 'sku', 'barcode', 'image_url',
            'price_delta', 'stock', 'is_active', 'display_order'
        )


class CombinationResource(resources.ModelResource):
    """Resource for exporting stored combinations."""

    template_slug = fields.Field(
        column_name='template',
        attribute='template',
        widget=ForeignKeyWidget(VariationTemplate, 'slug')
    )

    class Meta:
        model = Combination
        import_id_fields = ['template_slug', 'option_key']
        fields = (
            'template_slug', 'option_key', 'name', 'sku', 'barcode',
            'price_delta', 'stock', 'notes', 'is_active', 'is_composite',
            'origin', 'is_modified'
        )
        export_order = fields


# =============================================================================
# Inlines
# =============================================================================

class AttributeNodeInline(SortableInlineAdminMixin, admin.TabularInline):
    model = AttributeNode
    extra = 1
    fields = ['name', 'parent', 'display_order']
    fk_name = 'template'


class OptionValueInline(SortableInlineAdminMixin, admin.TabularInline):
    model = OptionValue
    extra = 1
    fields = ['name', 'price_delta', 'stock', 'sku', 'is_active', 'display_order']


class CombinationInline(admin.TabularInline):
    model = Combination
    extra = 0
    fields = ['name', 'price_delta', 'stock', 'is_active', 'origin']
    readonly_fields = ['name', 'origin']
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(VariationTemplate)
class VariationTemplateAdmin(SortableAdminBase, admin.ModelAdmin):
    list_display = [
        'name', 'slug', 'combination_count', 'active_combination_count',
        'is_active', 'created_at'
    ]
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'slug', 'description']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['combination_count', 'active_combination_count', 'created_at', 'updated_at']
    inlines = [AttributeNodeInline, CombinationInline]

    fieldsets = (
        (None, {
            'fields': ('name', 'slug', 'description', 'is_active')
        }),
        ('Informações', {
            'fields': ('combination_count', 'active_combination_count', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['regenerate_combinations', 'save_combinations']

    @admin.action(description='Gerar combinações (rascunho)')
    def regenerate_combinations(self, request, queryset):
        for template in queryset:
            try:
                result = VariationWorkflowService.regenerate(template)
            except VariationError as exc:
                self.message_user(request, f'{template}: {exc}', level='error')
                continue
            self.message_user(
                request,
                f'{template}: {len(result.working_set)} combinações, '
                f'{len(result.orphaned)} órfãs.'
            )

    @admin.action(description='Salvar combinações do rascunho')
    def save_combinations(self, request, queryset):
        for template in queryset:
            try:
                result = VariationWorkflowService.save(template)
            except VariationError as exc:
                self.message_user(request, f'{template}: {exc}', level='error')
                continue
            self.message_user(
                request,
                f'{template}: {result.saved} salvas, {result.deleted} removidas.'
            )


@admin.register(AttributeNode)
class AttributeNodeAdmin(SortableAdminMixin, admin.ModelAdmin):
    list_display = ['full_path', 'template', 'depth', 'option_count', 'display_order']
    list_filter = ['template', 'depth']
    search_fields = ['name', 'template__name']
    autocomplete_fields = ['template', 'parent']
    readonly_fields = ['depth']
    inlines = [OptionValueInline]

    def option_count(self, obj):
        return obj.options.count()
    option_count.short_description = 'Valores'


@admin.register(OptionValue)
class OptionValueAdmin(ImportExportModelAdmin):
    resource_class = OptionValueResource
    list_display = ['name', 'attribute', 'price_delta', 'stock', 'is_active', 'display_order']
    list_filter = ['attribute__template', 'is_active']
    list_editable = ['price_delta', 'stock', 'is_active', 'display_order']
    search_fields = ['name', 'sku', 'attribute__name']
    autocomplete_fields = ['attribute']


@admin.register(Combination)
class CombinationAdmin(ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_class = CombinationResource
    list_display = [
        'name', 'template', 'price_delta', 'stock', 'stock_status',
        'is_composite', 'origin', 'is_modified', 'is_active'
    ]
    list_filter = ['template', 'is_active', 'is_composite', 'origin', 'is_modified']
    list_editable = ['price_delta', 'stock', 'is_active']
    search_fields = ['name', 'sku', 'barcode', 'template__name']
    readonly_fields = [
        'option_key', 'attribute_paths', 'option_names', 'is_composite',
        'origin', 'defaults', 'created_at', 'updated_at'
    ]
    filter_horizontal = ['options']
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('template', 'name', 'is_active', 'origin', 'is_modified')
        }),
        ('Valores', {
            'fields': ('option_key', 'options', 'attribute_paths', 'option_names', 'is_composite')
        }),
        ('Comercial', {
            'fields': ('price_delta', 'stock', 'sku', 'barcode', 'notes')
        }),
        ('Informações', {
            'fields': ('defaults', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['activate_combinations', 'deactivate_combinations']

    def stock_status(self, obj):
        if obj.stock <= 0:
            return format_html('<span style="color: {};">{}</span>', 'red', 'Sem estoque')
        return format_html('<span style="color: {};">{}</span>', 'green', 'Em estoque')
    stock_status.short_description = 'Status Estoque'

    @admin.action(description='Ativar combinações selecionadas')
    def activate_combinations(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'{count} combinações ativadas.')

    @admin.action(description='Desativar combinações selecionadas')
    def deactivate_combinations(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'{count} combinações desativadas.')


# =============================================================================
# Admin Site Configuration
# =============================================================================

admin.site.site_header = 'Variações Admin'
admin.site.site_title = 'Variações'
admin.site.index_title = 'Painel de Administração'
