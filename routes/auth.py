"""
Authentication routes and the admin guards shared by other blueprints.
"""
import logging
from urllib.parse import urlsplit
from flask import Blueprint, flash, jsonify, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user
from models.user import User
import strings as text

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def _safe_redirect_target(target: str | None):
    if not target:
        return None
    parsed = urlsplit(target)
    if parsed.scheme or parsed.netloc:
        return None
    if not target.startswith('/') or target.startswith('//'):
        return None
    return target


def role_default_redirect(user) -> str:
    if getattr(user, 'is_admin', False):
        return url_for('dashboard.index')
    return url_for('main.index')


def is_admin_session() -> bool:
    return bool(current_user.is_authenticated and getattr(current_user, 'is_admin', False))


def require_admin_json():
    """Return a 401 JSON response unless the session belongs to an admin."""
    if not is_admin_session():
        return jsonify({'error': 'Unauthorized'}), 401
    return None


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Log in with email and password."""
    if current_user.is_authenticated:
        return redirect(role_default_redirect(current_user))

    if request.method == 'POST':
        email = (request.form.get('email') or '').strip().lower()
        password = request.form.get('password') or ''
        next_page = _safe_redirect_target(request.form.get('next'))

        user = User.query.filter_by(email=email).first()
        if not user or not user.check_password(password):
            logger.info('Failed login for %s', email)
            flash(text.FLASH['login_invalid'], 'error')
            return render_template('auth/login.html', next_page=next_page, email=email), 401

        login_user(user)
        logger.info('User %s logged in', user.email)
        flash(text.FLASH['login_welcome'].format(name=user.name), 'success')
        return redirect(next_page or role_default_redirect(user))

    next_page = _safe_redirect_target(request.args.get('next'))
    return render_template('auth/login.html', next_page=next_page, email='')


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Log out current user."""
    logger.info('User %s logged out', current_user.email)
    logout_user()
    flash(text.FLASH['logged_out'], 'success')
    return redirect(url_for('main.index'))
