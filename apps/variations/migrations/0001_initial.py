# Generated manually

from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import simple_history.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='VariationTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Nome')),
                ('slug', models.SlugField(max_length=255, unique=True, verbose_name='Slug')),
                ('description', models.TextField(blank=True, verbose_name='Descrição')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
            ],
            options={
                'verbose_name': 'Template de Variação',
                'verbose_name_plural': 'Templates de Variação',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='AttributeNode',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Nome')),
                ('depth', models.PositiveIntegerField(default=0, editable=False, verbose_name='Nível')),
                ('display_order', models.PositiveIntegerField(default=0, verbose_name='Ordem de exibição')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='children',
                    to='variations.attributenode',
                    verbose_name='Atributo Pai'
                )),
                ('template', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='attributes',
                    to='variations.variationtemplate',
                    verbose_name='Template'
                )),
            ],
            options={
                'verbose_name': 'Atributo de Variação',
                'verbose_name_plural': 'Atributos de Variação',
                'ordering': ['display_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='OptionValue',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Nome')),
                ('sku', models.CharField(blank=True, max_length=100, verbose_name='SKU')),
                ('barcode', models.CharField(blank=True, max_length=100, verbose_name='Código de barras')),
                ('image_url', models.URLField(blank=True, max_length=500, verbose_name='URL da imagem')),
                ('price_delta', models.DecimalField(
                    decimal_places=2,
                    default=Decimal('0.00'),
                    help_text='Ajuste sobre o preço base (negativo para desconto)',
                    max_digits=10,
                    verbose_name='Valor adicional'
                )),
                ('stock', models.PositiveIntegerField(default=0, verbose_name='Estoque')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('display_order', models.PositiveIntegerField(default=0, verbose_name='Ordem de exibição')),
                ('attribute', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='options',
                    to='variations.attributenode',
                    verbose_name='Atributo'
                )),
            ],
            options={
                'verbose_name': 'Valor de Atributo',
                'verbose_name_plural': 'Valores de Atributos',
                'ordering': ['display_order', 'name'],
                'unique_together': {('attribute', 'name')},
            },
        ),
        migrations.CreateModel(
            name='Combination',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('option_key', models.CharField(max_length=500, verbose_name='Chave de opções')),
                ('attribute_paths', models.JSONField(blank=True, default=list, verbose_name='Atributos')),
                ('option_names', models.JSONField(blank=True, default=list, verbose_name='Nomes dos valores')),
                ('is_composite', models.BooleanField(default=False, verbose_name='Composta')),
                ('name', models.CharField(max_length=500, verbose_name='Nome')),
                ('sku', models.CharField(blank=True, max_length=100, verbose_name='SKU')),
                ('barcode', models.CharField(blank=True, max_length=100, verbose_name='Código de barras')),
                ('price_delta', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, verbose_name='Valor adicional')),
                ('stock', models.PositiveIntegerField(default=0, verbose_name='Estoque')),
                ('notes', models.TextField(blank=True, verbose_name='Observações')),
                ('is_active', models.BooleanField(default=False, verbose_name='Ativo')),
                ('origin', models.CharField(
                    choices=[('automatic', 'Automática'), ('custom', 'Customizada')],
                    default='automatic',
                    max_length=20,
                    verbose_name='Origem'
                )),
                ('is_modified', models.BooleanField(
                    default=False,
                    help_text='Editada manualmente; não é sobrescrita ao regerar',
                    verbose_name='Modificada'
                )),
                ('defaults', models.JSONField(
                    blank=True,
                    default=dict,
                    help_text='Valores originais da geração automática',
                    verbose_name='Valores gerados'
                )),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
                ('options', models.ManyToManyField(
                    blank=True,
                    related_name='combinations',
                    to='variations.optionvalue',
                    verbose_name='Valores'
                )),
                ('template', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='combinations',
                    to='variations.variationtemplate',
                    verbose_name='Template'
                )),
            ],
            options={
                'verbose_name': 'Combinação',
                'verbose_name_plural': 'Combinações',
                'ordering': ['template', 'is_composite', 'name'],
                'unique_together': {('template', 'option_key')},
            },
        ),
        migrations.CreateModel(
            name='HistoricalCombination',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('option_key', models.CharField(max_length=500, verbose_name='Chave de opções')),
                ('attribute_paths', models.JSONField(blank=True, default=list, verbose_name='Atributos')),
                ('option_names', models.JSONField(blank=True, default=list, verbose_name='Nomes dos valores')),
                ('is_composite', models.BooleanField(default=False, verbose_name='Composta')),
                ('name', models.CharField(max_length=500, verbose_name='Nome')),
                ('sku', models.CharField(blank=True, max_length=100, verbose_name='SKU')),
                ('barcode', models.CharField(blank=True, max_length=100, verbose_name='Código de barras')),
                ('price_delta', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, verbose_name='Valor adicional')),
                ('stock', models.PositiveIntegerField(default=0, verbose_name='Estoque')),
                ('notes', models.TextField(blank=True, verbose_name='Observações')),
                ('is_active', models.BooleanField(default=False, verbose_name='Ativo')),
                ('origin', models.CharField(
                    choices=[('automatic', 'Automática'), ('custom', 'Customizada')],
                    default='automatic',
                    max_length=20,
                    verbose_name='Origem'
                )),
                ('is_modified', models.BooleanField(
                    default=False,
                    help_text='Editada manualmente; não é sobrescrita ao regerar',
                    verbose_name='Modificada'
                )),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Atualizado em')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(
                    choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')],
                    max_length=1
                )),
                ('history_user', models.ForeignKey(
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='+',
                    to=settings.AUTH_USER_MODEL
                )),
                ('template', models.ForeignKey(
                    blank=True,
                    db_constraint=False,
                    null=True,
                    on_delete=django.db.models.deletion.DO_NOTHING,
                    related_name='+',
                    to='variations.variationtemplate',
                    verbose_name='Template'
                )),
            ],
            options={
                'verbose_name': 'historical Combinação',
                'verbose_name_plural': 'historical Combinações',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
