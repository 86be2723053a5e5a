"""
Shipping Admin Routes
Settings pages for shipping method instances.
"""

from functools import wraps

from flask import Blueprint, abort, current_app, flash, redirect, render_template, url_for
from flask_babel import gettext as _
from flask_login import current_user

from shipdesc.extensions import login_manager
from shipdesc.shipping.constants import get_shipping_method
from shipdesc.shipping.exceptions import ShippingInstanceNotFoundException, ShippingSettingsValidationException
from shipdesc.shipping.forms import build_instance_form_class, instance_form_data
from shipdesc.shipping.service import ShippingService

admin_shipping_bp = Blueprint('admin_shipping', __name__, url_prefix='/admin/shipping')


def admin_required(f):
    """Decorator to require admin access for admin pages."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        if not current_user.can_manage_shipping:
            abort(403)
        return f(*args, **kwargs)
    return decorated_function


@admin_shipping_bp.route('/', methods=['GET'])
@admin_required
def index():
    """Zones and their shipping methods."""
    zones = ShippingService.get_all_zones()
    if not any(zone.methods for zone in zones):
        flash(_('No shipping methods are configured yet. Descriptions will not be shown until one is added.'), 'warning')
    return render_template('admin/shipping_zones.html', zones=zones)


@admin_shipping_bp.route('/instances/<int:instance_id>', methods=['GET', 'POST'])
@admin_required
def edit_instance(instance_id):
    """Instance settings form, including the shipping description."""
    try:
        instance = ShippingService.get_instance(instance_id)
    except ShippingInstanceNotFoundException:
        abort(404)

    form_class = build_instance_form_class(instance.method_id)
    form = form_class(data={**(instance.settings or {}), 'enabled': instance.enabled})

    if form.validate_on_submit():
        try:
            ShippingService.update_instance_settings(
                instance_id,
                instance_form_data(form),
                enabled=form.enabled.data
            )
        except ShippingSettingsValidationException as e:
            for key, message in e.errors.items():
                form[key].errors.append(message)
        else:
            current_app.logger.info(f'Shipping settings saved from admin form: {instance.rate_id}')
            flash(_('Shipping method settings saved.'), 'success')
            return redirect(url_for('admin_shipping.edit_instance', instance_id=instance_id))

    method = get_shipping_method(instance.method_id)
    return render_template('admin/shipping_instance.html', instance=instance, method=method, form=form)
