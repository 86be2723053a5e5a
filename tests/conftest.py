# tests/conftest.py
from types import SimpleNamespace

import pytest

from shipdesc import create_app
from shipdesc.config import TestingConfig
from shipdesc.extensions import db
from shipdesc.models import User
from shipdesc.shipping.service import ShippingService


@pytest.fixture
def app():
    """Application on an in-memory database, inside an app context."""
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def shipping_setup(app):
    """A domestic zone with three methods and a catch-all zone with one."""
    rest_of_world = ShippingService.ensure_rest_of_world_zone()
    domestic = ShippingService.create_zone('Domestic', zone_order=1)

    flat_rate = ShippingService.add_method_instance(
        domestic.id, 'flat_rate',
        settings={'title': 'Flat rate', 'cost': '10.00', 'description': '3-5 business days'}
    )
    local_pickup = ShippingService.add_method_instance(
        domestic.id, 'local_pickup',
        settings={'title': 'Local pickup', 'description': 'Pick up in-store, ready in 1 hour'}
    )
    free_shipping = ShippingService.add_method_instance(
        domestic.id, 'free_shipping',
        settings={'title': 'Free shipping'}
    )
    international = ShippingService.add_method_instance(
        rest_of_world.id, 'flat_rate',
        settings={'title': 'International', 'cost': '35', 'description': '10-20 business days, <em>tracked</em>'}
    )

    return SimpleNamespace(
        domestic=domestic,
        rest_of_world=rest_of_world,
        flat_rate=flat_rate,
        local_pickup=local_pickup,
        free_shipping=free_shipping,
        international=international,
    )


@pytest.fixture
def admin_user(app):
    user = User(username='admin', email='admin@example.com', is_admin=True, role='admin')
    user.set_password('secret')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def customer_user(app):
    user = User(username='customer', email='customer@example.com')
    user.set_password('secret')
    db.session.add(user)
    db.session.commit()
    return user


def _login(client, user):
    with client.session_transaction() as session:
        session['_user_id'] = str(user.id)
        session['_fresh'] = True
    return client


@pytest.fixture
def admin_client(client, admin_user):
    return _login(client, admin_user)


@pytest.fixture
def customer_client(client, customer_user):
    return _login(client, customer_user)
