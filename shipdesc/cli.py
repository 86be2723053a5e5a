"""
Command line tools
Seeds the default zones, shipping methods and their descriptions, and creates admin users.
"""

import click
from flask import current_app
from flask.cli import with_appcontext

from shipdesc.extensions import db
from shipdesc.models.user import User
from shipdesc.shipping.service import ShippingService

SEED_ZONES = [
    {
        'name': 'Domestic',
        'methods': [
            ('flat_rate', {'title': 'Flat rate', 'cost': '10.00',
                           'description': '3-5 business days'}),
            ('free_shipping', {'title': 'Free shipping', 'min_amount': '100',
                               'description': 'Free on orders over 100. <strong>5-8 business days</strong>'}),
            ('local_pickup', {'title': 'Local pickup', 'cost': '0',
                              'description': 'Pick up in-store, ready in 1 hour'}),
        ],
    },
]

REST_OF_WORLD_METHODS = [
    ('flat_rate', {'title': 'International flat rate', 'cost': '35.00',
                   'description': '10-20 business days, tracked'}),
]


def seed_shipping_data():
    """Create seed zones and methods. Returns the number of method instances created."""
    created = 0
    rest_of_world = ShippingService.ensure_rest_of_world_zone()

    existing_zones = {zone.name for zone in ShippingService.get_zones()}
    for order, zone_data in enumerate(SEED_ZONES, start=1):
        if zone_data['name'] in existing_zones:
            current_app.logger.info(f"Zone {zone_data['name']} already exists, skipping")
            continue
        zone = ShippingService.create_zone(zone_data['name'], zone_order=order)
        for method_id, settings in zone_data['methods']:
            ShippingService.add_method_instance(zone.id, method_id, settings=settings)
            created += 1

    if not rest_of_world.methods:
        for method_id, settings in REST_OF_WORLD_METHODS:
            ShippingService.add_method_instance(rest_of_world.id, method_id, settings=settings)
            created += 1

    return created


@click.command('seed-shipping')
@click.option('--create-tables', is_flag=True, help='Create missing tables before seeding.')
@with_appcontext
def seed_shipping_command(create_tables):
    """Seed shipping zones, methods and descriptions."""
    if create_tables:
        db.create_all()
    created = seed_shipping_data()
    click.echo(f'Created {created} shipping method(s).')


def create_admin_user(username, email, password):
    """Create an admin, or promote and re-password an existing user with that username."""
    user = User.query.filter_by(username=username).first()
    if user is None:
        user = User(username=username, email=email)
        db.session.add(user)
    user.is_admin = True
    user.role = 'admin'
    user.active = True
    user.set_password(password)
    db.session.commit()
    current_app.logger.info(f'Admin user ready: {username}')
    return user


@click.command('create-admin')
@click.option('--username', prompt=True)
@click.option('--email', prompt=True)
@click.password_option()
@with_appcontext
def create_admin_command(username, email, password):
    """Create a user who can manage shipping settings."""
    create_admin_user(username.strip(), email.strip(), password)
    click.echo(f'Admin user {username} is ready.')


def init_cli(app):
    app.cli.add_command(seed_shipping_command)
    app.cli.add_command(create_admin_command)
