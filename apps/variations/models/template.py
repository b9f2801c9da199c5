from django.db import models
from django.utils.text import slugify


class VariationTemplate(models.Model):
    """
    Scope that owns an attribute forest and its combinations.
    Example: "Cartão de Visita" with attributes Papel > Tipo, Papel > Gramatura, Cor.
    """
    name = models.CharField(
        max_length=255,
        verbose_name='Nome'
    )
    slug = models.SlugField(
        max_length=255,
        unique=True,
        verbose_name='Slug'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Descrição'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Ativo'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Criado em'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Atualizado em'
    )

    class Meta:
        ordering = ['name']
        verbose_name = 'Template de Variação'
        verbose_name_plural = 'Templates de Variação'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
            base_slug = self.slug
            counter = 1
            while VariationTemplate.objects.filter(slug=self.slug).exclude(pk=self.pk).exists():
                self.slug = f"{base_slug}-{counter}"
                counter += 1
        super().save(*args, **kwargs)

    @property
    def combination_count(self):
        return self.combinations.count()

    @property
    def active_combination_count(self):
        return self.combinations.filter(is_active=True).count()

    def get_root_attributes(self):
        return self.attributes.filter(parent__isnull=True)
