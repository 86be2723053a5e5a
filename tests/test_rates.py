from decimal import Decimal
from types import SimpleNamespace

import pytest

from shipdesc.shipping.exceptions import InvalidRateIdException
from shipdesc.shipping.rates import ShippingRate, ShippingRateId, parse_rate_id


def test_parse_rate_id_splits_method_and_instance():
    assert parse_rate_id('flat_rate:5') == ShippingRateId('flat_rate', '5')


def test_parse_rate_id_ignores_extra_segments():
    assert parse_rate_id('table_rate:5:1') == ShippingRateId('table_rate', '5')


def test_rate_id_round_trips_to_string():
    assert str(ShippingRateId('local_pickup', '2')) == 'local_pickup:2'


@pytest.mark.parametrize('rate_id', ['', 'onlyonepart', ':', 'flat_rate:', ':5', None, 42])
def test_parse_rate_id_rejects_malformed_ids(rate_id):
    with pytest.raises(InvalidRateIdException):
        parse_rate_id(rate_id)


def test_rate_from_instance_uses_configured_cost():
    instance = SimpleNamespace(
        rate_id='flat_rate:3',
        method_id='flat_rate',
        instance_id=3,
        title='Flat rate',
        get_instance_option=lambda key, default='': {'cost': '12.5'}.get(key, default),
    )

    rate = ShippingRate.from_instance(instance)

    assert rate.id == 'flat_rate:3'
    assert rate.instance_id == '3'
    assert rate.cost == Decimal('12.5')
    assert rate.description == ''


def test_rate_from_instance_with_bad_cost_is_free():
    instance = SimpleNamespace(
        rate_id='flat_rate:3', method_id='flat_rate', instance_id=3, title='Flat rate',
        get_instance_option=lambda key, default='': 'n/a',
    )

    assert ShippingRate.from_instance(instance).cost == Decimal('0')


def test_rate_to_dict_includes_description():
    rate = ShippingRate(id='flat_rate:5', method_id='flat_rate', instance_id='5',
                        label='Flat rate', cost=Decimal('10'), description='3-5 business days')

    data = rate.to_dict()

    assert data['rate_id'] == 'flat_rate:5'
    assert data['price_display'] == '10.00'
    assert data['description'] == '3-5 business days'
