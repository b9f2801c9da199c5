from decimal import Decimal

from django.db import models
from simple_history.models import HistoricalRecords


class Combination(models.Model):
    """
    Stored variation combination.

    ``option_key`` is the canonical sorted list of option ids and is the
    identity of the combination inside its template; two rows never share it.
    """
    ORIGIN_AUTOMATIC = 'automatic'
    ORIGIN_CUSTOM = 'custom'
    ORIGIN_CHOICES = [
        (ORIGIN_AUTOMATIC, 'Automática'),
        (ORIGIN_CUSTOM, 'Customizada'),
    ]

    template = models.ForeignKey(
        'variations.VariationTemplate',
        on_delete=models.CASCADE,
        related_name='combinations',
        verbose_name='Template'
    )
    option_key = models.CharField(
        max_length=500,
        verbose_name='Chave de opções'
    )
    options = models.ManyToManyField(
        'variations.OptionValue',
        blank=True,
        related_name='combinations',
        verbose_name='Valores'
    )
    attribute_paths = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Atributos'
    )
    option_names = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Nomes dos valores'
    )
    is_composite = models.BooleanField(
        default=False,
        verbose_name='Composta'
    )
    name = models.CharField(
        max_length=500,
        verbose_name='Nome'
    )
    sku = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='SKU'
    )
    barcode = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Código de barras'
    )
    price_delta = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name='Valor adicional'
    )
    stock = models.PositiveIntegerField(
        default=0,
        verbose_name='Estoque'
    )
    notes = models.TextField(
        blank=True,
        verbose_name='Observações'
    )
    is_active = models.BooleanField(
        default=False,
        verbose_name='Ativo'
    )
    origin = models.CharField(
        max_length=20,
        choices=ORIGIN_CHOICES,
        default=ORIGIN_AUTOMATIC,
        verbose_name='Origem'
    )
    is_modified = models.BooleanField(
        default=False,
        verbose_name='Modificada',
        help_text='Editada manualmente; não é sobrescrita ao regerar'
    )
    defaults = models.JSONField(
        default=dict,
        blank=True,
        verbose_name='Valores gerados',
        help_text='Valores originais da geração automática'
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Criado em'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Atualizado em'
    )

    history = HistoricalRecords(excluded_fields=['defaults'])

    class Meta:
        ordering = ['template', 'is_composite', 'name']
        unique_together = ['template', 'option_key']
        verbose_name = 'Combinação'
        verbose_name_plural = 'Combinações'

    def __str__(self):
        return self.name

    @property
    def is_in_stock(self):
        return self.stock > 0

    def get_option_ids(self):
        return sorted(str(option.pk) for option in self.options.all())
