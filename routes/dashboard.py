"""
Admin dashboard: HTML management of administrators and gallery photos.

Access is enforced in ``app.before_request``; every view here assumes an
authenticated admin.
"""
import logging
from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from database import db
from models.audit_log import AdminCreationLog
from models.photo import Photo
from models.user import User
from routes.admin_api import delete_admin_account
from services.admin_creation import AdminCreationError, create_admin
from services.audit import recent_creation_attempts
from services.client_info import ClientFingerprint
from services.photos import PhotoUploadError, create_photo, delete_photo, list_photos
import strings as text

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/')
def index():
    stats = {
        'admins': User.query.filter_by(role=User.ROLE_ADMIN).count(),
        'photos': Photo.query.count(),
        'published_photos': Photo.query.filter_by(is_published=True).count(),
        'suspicious_attempts': AdminCreationLog.query.filter(
            AdminCreationLog.status.in_([
                AdminCreationLog.STATUS_SUSPICIOUS,
                AdminCreationLog.STATUS_SUCCESS_SUSPICIOUS,
            ])
        ).count(),
    }
    return render_template('dashboard/index.html', stats=stats, attempts=recent_creation_attempts(10))


@dashboard_bp.route('/admins')
def admins():
    rows = User.query.filter_by(role=User.ROLE_ADMIN).order_by(User.created_at.desc()).all()
    return render_template('dashboard/admins.html', admins=rows)


@dashboard_bp.route('/admins/add', methods=['GET', 'POST'])
def add_admin():
    """Create an admin through the same guarded workflow as the API."""
    if request.method == 'POST':
        payload = {
            'name': request.form.get('name', ''),
            'email': request.form.get('email', ''),
            'password': request.form.get('password', ''),
            'adminKey': request.form.get('adminKey', ''),
        }
        try:
            result = create_admin(
                payload,
                ClientFingerprint.from_request(request),
                admin_key=current_app.config.get('ADMIN_CREATION_KEY', ''),
                block_suspicious=bool(current_app.config.get('BLOCK_SUSPICIOUS_CLIENTS', False)),
            )
        except AdminCreationError as exc:
            flash(text.error_message(exc.message), 'error')
            return render_template(
                'dashboard/admin_add.html',
                name=payload['name'],
                email=payload['email'],
            ), exc.status_code

        key = 'admin_created_suspicious' if result.suspicious else 'admin_created'
        flash(text.FLASH[key].format(name=result.user.name), 'warning' if result.suspicious else 'success')
        return redirect(url_for('dashboard.admins'))

    return render_template('dashboard/admin_add.html', name='', email='')


@dashboard_bp.route('/admins/<admin_id>/delete', methods=['POST'])
def remove_admin(admin_id):
    try:
        error, _status = delete_admin_account(admin_id)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error deleting admin %s', admin_id)
        flash(text.FLASH['internal_error'], 'error')
        return redirect(url_for('dashboard.admins'))
    if error == 'Admin not found':
        flash(text.FLASH['admin_not_found'], 'error')
    elif error == 'Cannot delete your own account':
        flash(text.FLASH['admin_self_delete'], 'error')
    elif error:
        flash(error, 'error')
    else:
        flash(text.FLASH['admin_deleted'], 'success')
    return redirect(url_for('dashboard.admins'))


@dashboard_bp.route('/attempts')
def attempts():
    status = (request.args.get('status') or '').strip().upper() or None
    if status not in AdminCreationLog.STATUSES:
        status = None
    return render_template(
        'dashboard/attempts.html',
        attempts=recent_creation_attempts(200, status),
        statuses=AdminCreationLog.STATUSES,
        selected_status=status,
    )


@dashboard_bp.route('/fotos')
def photos():
    page = max(1, request.args.get('page', 1, type=int) or 1)
    result = list_photos(page=page, limit=20, include_unpublished=True)
    return render_template('dashboard/photos.html', photos=result.photos, pagination=result.pagination())


@dashboard_bp.route('/fotos/add', methods=['GET', 'POST'])
def add_photo():
    if request.method == 'POST':
        try:
            photo = create_photo(request.files.get('file'), request.form, current_user)
        except PhotoUploadError as exc:
            if exc.details:
                logger.error('Photo upload failed: %s', exc.details)
            flash(text.error_message(exc.message), 'error')
            return render_template('dashboard/photo_add.html', form=request.form), exc.status_code
        except SQLAlchemyError:
            logger.exception('Error saving uploaded photo')
            flash(text.FLASH['internal_error'], 'error')
            return render_template('dashboard/photo_add.html', form=request.form), 500
        flash(text.FLASH['photo_uploaded'].format(title=photo.title), 'success')
        return redirect(url_for('dashboard.photos'))

    return render_template('dashboard/photo_add.html', form={})


@dashboard_bp.route('/fotos/<photo_id>/toggle', methods=['POST'])
def toggle_photo(photo_id):
    photo = db.session.get(Photo, photo_id)
    if photo is None:
        flash(text.FLASH['photo_not_found'], 'error')
        return redirect(url_for('dashboard.photos'))

    photo.is_published = not photo.is_published
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error toggling photo %s', photo_id)
        flash(text.FLASH['internal_error'], 'error')
        return redirect(url_for('dashboard.photos'))
    key = 'photo_published' if photo.is_published else 'photo_unpublished'
    flash(text.FLASH[key].format(title=photo.title), 'success')
    return redirect(url_for('dashboard.photos'))


@dashboard_bp.route('/fotos/<photo_id>/delete', methods=['POST'])
def remove_photo(photo_id):
    photo = db.session.get(Photo, photo_id)
    if photo is None:
        flash(text.FLASH['photo_not_found'], 'error')
        return redirect(url_for('dashboard.photos'))

    try:
        delete_photo(photo)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error deleting photo %s', photo_id)
        flash(text.FLASH['internal_error'], 'error')
        return redirect(url_for('dashboard.photos'))
    flash(text.FLASH['photo_deleted'], 'success')
    return redirect(url_for('dashboard.photos'))
