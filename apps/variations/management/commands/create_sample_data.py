"""
Create a sample template with a nested attribute tree.
Run with: python manage.py create_sample_data [--generate]
"""
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.variations.models import VariationTemplate, AttributeNode, OptionValue
from apps.variations.services import VariationWorkflowService


SAMPLE_TREE = [
    ('Papel', [
        ('Tipo', [('Couché', '0', 100), ('Reciclado', '1.50', 40)]),
        ('Gramatura', [('250g', '0', 80), ('300g', '3.00', 25)]),
    ]),
    ('Cor', [('Azul', '5.00', 10), ('Preto', '-2.00', 4)]),
    ('Acabamento', [('Fosco', '0', 50), ('Brilho', '2.00', 50), ('Verniz Localizado', '8.00', 12)]),
]


class Command(BaseCommand):
    help = 'Cria um template de exemplo com atributos aninhados'

    def add_arguments(self, parser):
        parser.add_argument(
            '--slug',
            default='cartao-de-visita',
            help='Slug do template de exemplo'
        )
        parser.add_argument(
            '--generate',
            action='store_true',
            help='Gera o rascunho de combinações após criar os dados'
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            template, created = VariationTemplate.objects.get_or_create(
                slug=options['slug'],
                defaults={
                    'name': 'Cartão de Visita',
                    'description': 'Cartões impressos com papel, cor e acabamento'
                }
            )
            self.stdout.write(
                f"{'Creating' if created else 'Updating'} template {template.slug}..."
            )
            for order, (name, children) in enumerate(SAMPLE_TREE):
                self._create_node(template, None, name, children, order)

        self.stdout.write(self.style.SUCCESS(
            f'{template.attributes.count()} atributos, '
            f'{OptionValue.objects.filter(attribute__template=template).count()} valores.'
        ))

        if options['generate']:
            result = VariationWorkflowService.regenerate(template)
            self.stdout.write(self.style.SUCCESS(
                f'{len(result.working_set)} combinações geradas no rascunho.'
            ))

    def _create_node(self, template, parent, name, children, order):
        node, _ = AttributeNode.objects.get_or_create(
            template=template,
            parent=parent,
            name=name,
            defaults={'display_order': order}
        )
        if children and isinstance(children[0][1], list):
            for child_order, (child_name, grandchildren) in enumerate(children):
                self._create_node(template, node, child_name, grandchildren, child_order)
            return node

        for option_order, (value, price, stock) in enumerate(children):
            OptionValue.objects.get_or_create(
                attribute=node,
                name=value,
                defaults={
                    'price_delta': Decimal(price),
                    'stock': stock,
                    'display_order': option_order,
                }
            )
        return node
