"""
Authentication Routes
Login and logout for shipping administrators.
"""

from urllib.parse import urlsplit

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from flask_babel import gettext as _
from flask_login import current_user, login_required, login_user, logout_user

from shipdesc.auth.forms import LoginForm
from shipdesc.models.user import User

auth_bp = Blueprint('auth', __name__)


def _safe_next_url(target):
    """Only same-site paths are followed after login."""
    if not target:
        return None
    parts = urlsplit(target)
    if parts.scheme or parts.netloc or not target.startswith('/') or target.startswith('//'):
        return None
    return target


def _landing_url(user):
    if user.can_manage_shipping:
        return url_for('admin_shipping.index')
    return url_for('storefront.home')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(_landing_url(current_user))

    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(username=form.username.data.strip()).first()
        if user and user.check_password(form.password.data) and user.is_active:
            login_user(user, remember=form.remember.data)
            current_app.logger.info(f'User {user.username} logged in')
            next_page = _safe_next_url(request.args.get('next'))
            return redirect(next_page or _landing_url(user))

        current_app.logger.warning(f'Failed login for username {form.username.data!r}')
        flash(_('Invalid username or password'), 'error')

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    flash(_('You have been logged out.'), 'info')
    return redirect(url_for('storefront.home'))
