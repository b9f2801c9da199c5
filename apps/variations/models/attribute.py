from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class AttributeNode(models.Model):
    """
    Hierarchical variation attribute.
    Examples: Papel > Tipo, Papel > Gramatura, Cor

    Only leaf attributes (without sub-attributes) own option values.
    """
    template = models.ForeignKey(
        'variations.VariationTemplate',
        on_delete=models.CASCADE,
        related_name='attributes',
        verbose_name='Template'
    )
    name = models.CharField(
        max_length=100,
        verbose_name='Nome'
    )
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children',
        verbose_name='Atributo Pai'
    )
    depth = models.PositiveIntegerField(
        default=0,
        editable=False,
        verbose_name='Nível'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Ordem de exibição'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['display_order', 'name']
        verbose_name = 'Atributo de Variação'
        verbose_name_plural = 'Atributos de Variação'

    def __str__(self):
        return self.full_path

    @property
    def full_path(self):
        """Returns the full attribute path: Parent > Child > Grandchild"""
        ancestors = self.get_ancestors()
        path = [a.name for a in ancestors] + [self.name]
        return ' > '.join(path)

    def get_ancestors(self):
        """Returns list of all ancestor attributes, from root to immediate parent."""
        ancestors = []
        seen = {self.pk}
        current = self.parent
        while current and current.pk not in seen:
            seen.add(current.pk)
            ancestors.insert(0, current)
            current = current.parent
        return ancestors

    def get_descendants(self):
        """Returns all descendant attributes (children, grandchildren, etc.)"""
        descendants = []
        for child in self.children.all():
            descendants.append(child)
            descendants.extend(child.get_descendants())
        return descendants

    @property
    def is_leaf(self):
        return not self.children.exists()

    def clean(self):
        if self.parent_id is None:
            return
        if self.parent.template_id != self.template_id:
            raise ValidationError({'parent': 'O atributo pai deve pertencer ao mesmo template.'})
        if self.pk and (self.parent_id == self.pk or self in self.parent.get_ancestors()):
            raise ValidationError({'parent': 'Um atributo não pode ser descendente de si mesmo.'})
        if self.parent.options.exists():
            raise ValidationError({'parent': 'O atributo pai já possui valores cadastrados.'})

    def save(self, *args, **kwargs):
        self.depth = self.parent.depth + 1 if self.parent_id else 0
        super().save(*args, **kwargs)


class OptionValue(models.Model):
    """
    Selectable value of a leaf attribute.

    Examples:
        - Papel > Tipo -> "Couché", "Reciclado"
        - Cor -> "Azul" (+R$ 5,00), "Preto" (-R$ 2,00)
    """
    attribute = models.ForeignKey(
        AttributeNode,
        on_delete=models.CASCADE,
        related_name='options',
        verbose_name='Atributo'
    )
    name = models.CharField(
        max_length=100,
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
    image_url = models.URLField(
        max_length=500,
        blank=True,
        verbose_name='URL da imagem'
    )
    price_delta = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name='Valor adicional',
        help_text='Ajuste sobre o preço base (negativo para desconto)'
    )
    stock = models.PositiveIntegerField(
        default=0,
        verbose_name='Estoque'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Ativo'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Ordem de exibição'
    )

    class Meta:
        ordering = ['display_order', 'name']
        unique_together = ['attribute', 'name']
        verbose_name = 'Valor de Atributo'
        verbose_name_plural = 'Valores de Atributos'

    def __str__(self):
        return f"{self.attribute.full_path}: {self.name}"

    def clean(self):
        if self.attribute_id and self.attribute.children.exists():
            raise ValidationError({
                'attribute': 'Somente atributos sem sub-atributos podem ter valores.'
            })
