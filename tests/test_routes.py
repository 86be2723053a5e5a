import pytest

from bs4 import BeautifulSoup

from shipdesc.shipping.descriptions import DescriptionResolver
from shipdesc.shipping.models import ShippingOption


def test_rates_include_descriptions(client, shipping_setup):
    response = client.get(f'/api/shipping/rates?zone_id={shipping_setup.domestic.id}')

    assert response.status_code == 200
    rates = {rate['rate_id']: rate for rate in response.get_json()}
    assert rates[shipping_setup.flat_rate.rate_id]['description'] == '3-5 business days'
    assert rates[shipping_setup.flat_rate.rate_id]['price'] == '10.00'
    assert rates[shipping_setup.free_shipping.rate_id]['description'] == ''


def test_rates_default_to_catch_all_zone(client, shipping_setup):
    response = client.get('/api/shipping/rates')

    assert [rate['rate_id'] for rate in response.get_json()] == [shipping_setup.international.rate_id]


def test_rates_reject_non_numeric_zone(client, shipping_setup):
    response = client.get('/api/shipping/rates?zone_id=abc')

    assert response.status_code == 400


def test_rates_for_unknown_zone_are_empty(client, shipping_setup):
    response = client.get('/api/shipping/rates?zone_id=99')

    assert response.status_code == 200
    assert response.get_json() == []


def test_descriptions_endpoint_returns_map(client, shipping_setup):
    response = client.get('/api/shipping/descriptions')

    assert response.status_code == 200
    assert response.get_json() == {
        shipping_setup.flat_rate.rate_id: '3-5 business days',
        shipping_setup.local_pickup.rate_id: 'Pick up in-store, ready in 1 hour',
        shipping_setup.international.rate_id: '10-20 business days, <em>tracked</em>',
    }


def test_block_fragment_is_annotated(client, shipping_setup):
    response = client.get(f'/api/shipping/block-fragment?zone_id={shipping_setup.domestic.id}')

    assert response.status_code == 200
    soup = BeautifulSoup(response.get_data(as_text=True), 'html.parser')
    descriptions = soup.select('.radio-control__option .shipping-method-description')
    assert [node.get_text() for node in descriptions] == [
        '3-5 business days',
        'Pick up in-store, ready in 1 hour',
    ]


def test_zones_list_catch_all_last(client, shipping_setup):
    response = client.get('/api/shipping/zones')

    zones = response.get_json()
    assert [zone['name'] for zone in zones] == ['Domestic', 'Rest of the World']
    assert zones[0]['shipping_methods'][0]['rate_id'] == shipping_setup.flat_rate.rate_id


def test_admin_endpoints_reject_anonymous(client, shipping_setup):
    url = f'/api/shipping/admin/instances/{shipping_setup.flat_rate.instance_id}'

    assert client.get(url).status_code == 403
    assert client.delete(url).status_code == 403


def test_admin_endpoints_reject_customers(customer_client, shipping_setup):
    url = f'/api/shipping/admin/instances/{shipping_setup.flat_rate.instance_id}'

    assert customer_client.put(url, json={'description': 'x'}).status_code == 403


def test_admin_updates_description(admin_client, shipping_setup):
    instance = shipping_setup.flat_rate

    response = admin_client.put(
        f'/api/shipping/admin/instances/{instance.instance_id}',
        json={'description': 'Next business day', 'ignored': 'value'}
    )

    assert response.status_code == 200
    assert response.get_json()['settings']['description'] == 'Next business day'
    assert 'ignored' not in response.get_json()['settings']
    option = ShippingOption.query.filter_by(option_name=f'shipping_flat_rate_{instance.instance_id}_settings').one()
    assert option.option_value['description'] == 'Next business day'
    assert DescriptionResolver().resolve(instance.rate_id) == 'Next business day'


def test_admin_update_rejects_negative_cost(admin_client, shipping_setup):
    response = admin_client.put(
        f'/api/shipping/admin/instances/{shipping_setup.flat_rate.instance_id}',
        json={'cost': '-5'}
    )

    assert response.status_code == 400
    assert response.get_json()['errors'] == {'cost': 'must be >= 0'}


def test_admin_update_unknown_instance(admin_client, shipping_setup):
    response = admin_client.put('/api/shipping/admin/instances/999', json={'description': 'x'})

    assert response.status_code == 404


def test_admin_creates_instance_with_description(admin_client, shipping_setup):
    response = admin_client.post(
        f'/api/shipping/admin/zones/{shipping_setup.domestic.id}/instances',
        json={'method_id': 'flat_rate', 'settings': {'title': 'Express', 'cost': '25', 'description': 'Next day'}}
    )

    assert response.status_code == 201
    created = response.get_json()
    assert created['settings'] == {'title': 'Express', 'cost': '25', 'description': 'Next day'}
    assert DescriptionResolver().resolve(created['rate_id']) == 'Next day'


def test_admin_create_rejects_unknown_method(admin_client, shipping_setup):
    response = admin_client.post(
        f'/api/shipping/admin/zones/{shipping_setup.domestic.id}/instances',
        json={'method_id': 'teleport'}
    )

    assert response.status_code == 400


def test_admin_create_in_unknown_zone(admin_client, shipping_setup):
    response = admin_client.post('/api/shipping/admin/zones/99/instances', json={'method_id': 'flat_rate'})

    assert response.status_code == 404


def test_deleted_instance_keeps_its_description(admin_client, shipping_setup):
    instance = shipping_setup.local_pickup
    rate_id = instance.rate_id

    response = admin_client.delete(f'/api/shipping/admin/instances/{instance.instance_id}')

    assert response.status_code == 200
    assert rate_id not in admin_client.get('/api/shipping/descriptions').get_json()
    assert DescriptionResolver().resolve(rate_id) == 'Pick up in-store, ready in 1 hour'


def test_health(client):
    assert client.get('/_health').get_json() == {'status': 'ok'}


@pytest.mark.parametrize('body', [[1], 'description', 5])
def test_admin_update_rejects_non_object_body(admin_client, shipping_setup, body):
    response = admin_client.put(f'/api/shipping/admin/instances/{shipping_setup.flat_rate.instance_id}', json=body)

    assert response.status_code == 400
    assert shipping_setup.flat_rate.get_instance_option('description') == '3-5 business days'


@pytest.mark.parametrize('body', [
    [{'method_id': 'flat_rate'}],
    {'method_id': 'flat_rate', 'settings': ['title', 'Express']},
    {'method_id': 7},
])
def test_admin_create_rejects_malformed_body(admin_client, shipping_setup, body):
    response = admin_client.post(f'/api/shipping/admin/zones/{shipping_setup.domestic.id}/instances', json=body)

    assert response.status_code == 400
    assert len(shipping_setup.domestic.methods) == 3
