from decimal import Decimal

import pytest
from django.core.cache import caches
from rest_framework.test import APIClient

from apps.variations.models import (
    VariationTemplate,
    AttributeNode as AttributeNodeModel,
    OptionValue as OptionValueModel,
)
from apps.variations.services import (
    AttributeForest,
    AttributeNode,
    OptionCatalog,
    OptionValue,
)


# =============================================================================
# Engine fixtures (no database)
# =============================================================================

@pytest.fixture
def forest():
    """Papel > Tipo, Papel > Gramatura, Cor"""
    return AttributeForest([
        AttributeNode('papel', 'Papel'),
        AttributeNode('tipo', 'Tipo', parent_id='papel', depth=1),
        AttributeNode('gramatura', 'Gramatura', parent_id='papel', depth=1),
        AttributeNode('cor', 'Cor'),
    ])


@pytest.fixture
def options():
    return [
        OptionValue('couche', 'tipo', 'Couché', stock=100),
        OptionValue('reciclado', 'tipo', 'Reciclado', price_delta='1.50', stock=40),
        OptionValue('250g', 'gramatura', '250g', stock=80),
        OptionValue('azul', 'cor', 'Azul', price_delta='5.00', stock=10),
        OptionValue('preto', 'cor', 'Preto', price_delta='-2.00', stock=4),
    ]


@pytest.fixture
def catalog(forest, options):
    return OptionCatalog(forest, options)


@pytest.fixture
def make_catalog():
    """Build a forest of flat roots from {attribute: [(option, price, stock), ...]}."""
    def _make(attributes):
        forest = AttributeForest(
            AttributeNode(name.lower(), name) for name in attributes
        )
        options = [
            OptionValue(
                f"{name.lower()}-{value.lower()}",
                name.lower(),
                value,
                price_delta=price,
                stock=stock,
            )
            for name, values in attributes.items()
            for value, price, stock in values
        ]
        return OptionCatalog(forest, options)
    return _make


# =============================================================================
# Database fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clear_drafts():
    caches['default'].clear()
    yield
    caches['default'].clear()


@pytest.fixture
def template(db):
    template = VariationTemplate.objects.create(name='Cartão de Visita')
    papel = AttributeNodeModel.objects.create(template=template, name='Papel', display_order=0)
    tipo = AttributeNodeModel.objects.create(
        template=template, name='Tipo', parent=papel, display_order=0
    )
    gramatura = AttributeNodeModel.objects.create(
        template=template, name='Gramatura', parent=papel, display_order=1
    )
    cor = AttributeNodeModel.objects.create(template=template, name='Cor', display_order=1)

    for attribute, name, price, stock, order in [
        (tipo, 'Couché', '0', 100, 0),
        (tipo, 'Reciclado', '1.50', 40, 1),
        (gramatura, '250g', '0', 80, 0),
        (cor, 'Azul', '5.00', 10, 0),
        (cor, 'Preto', '-2.00', 4, 1),
    ]:
        OptionValueModel.objects.create(
            attribute=attribute,
            name=name,
            price_delta=Decimal(price),
            stock=stock,
            display_order=order,
        )
    return template


@pytest.fixture
def option_ids(template):
    """Option value name -> primary key, as sent by API clients."""
    return {
        option.name: str(option.pk)
        for option in OptionValueModel.objects.filter(attribute__template=template)
    }


@pytest.fixture
def option_refs(template):
    """Option value name -> (attribute id, option id) ref as used by the engine."""
    return {
        option.name: (str(option.attribute_id), str(option.pk))
        for option in OptionValueModel.objects.filter(attribute__template=template)
    }


@pytest.fixture
def api_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
