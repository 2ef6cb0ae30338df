"""JSON API for administrator accounts and the creation audit trail."""
import logging
from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from database import db
from models.audit_log import AdminCreationLog
from models.user import User, UserCreationInfo
from routes.auth import require_admin_json
from services.admin_creation import AdminCreationError, create_admin
from services.audit import recent_creation_attempts
from services.client_info import ClientFingerprint

logger = logging.getLogger(__name__)

admin_api_bp = Blueprint('admin_api', __name__)


@admin_api_bp.route('/create', methods=['POST'])
def create():
    """Create an admin account if the caller knows the admin key."""
    try:
        client = ClientFingerprint.from_request(request)
        payload = request.get_json(silent=True)
        if payload is None:
            logger.info('Rejected admin creation with malformed JSON body')
            return jsonify({'error': 'Invalid JSON format in request body'}), 400

        result = create_admin(
            payload,
            client,
            admin_key=current_app.config.get('ADMIN_CREATION_KEY', ''),
            block_suspicious=bool(current_app.config.get('BLOCK_SUSPICIOUS_CLIENTS', False)),
        )
    except AdminCreationError as exc:
        return jsonify({'error': exc.message}), exc.status_code
    except Exception:
        db.session.rollback()
        logger.exception('Error creating admin')
        return jsonify({'error': 'Failed to create admin'}), 500

    return jsonify({
        'message': 'Admin created successfully',
        'user': result.user.to_dict(),
        'suspicious': result.suspicious,
    })


@admin_api_bp.route('/list')
def list_admins():
    denied = require_admin_json()
    if denied:
        return denied

    try:
        admins = (
            User.query
            .filter_by(role=User.ROLE_ADMIN)
            .order_by(User.created_at.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception('Error fetching admin users')
        return jsonify({'error': 'Failed to fetch admin users'}), 500
    return jsonify([admin.to_dict() for admin in admins])


def delete_admin_account(admin_id: str):
    """Delete an admin and its creation metadata.

    Returns ``(error_message, status_code)``; error_message is None on success.
    """
    admin = db.session.get(User, admin_id)
    if admin is None:
        return 'Admin not found', 404
    if admin.role != User.ROLE_ADMIN:
        return 'User is not an admin', 400
    if admin.email == current_user.email:
        return 'Cannot delete your own account', 400

    UserCreationInfo.query.filter_by(user_id=admin.id).delete()
    db.session.delete(admin)
    db.session.commit()
    logger.info('Admin %s deleted by %s', admin.email, current_user.email)
    return None, 200


@admin_api_bp.route('/delete', methods=['DELETE'])
def delete():
    denied = require_admin_json()
    if denied:
        return denied

    admin_id = (request.args.get('id') or '').strip()
    if not admin_id:
        return jsonify({'error': 'Admin ID is required'}), 400

    try:
        error, status = delete_admin_account(admin_id)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error deleting admin %s', admin_id)
        return jsonify({'error': 'Failed to delete admin'}), 500
    if error:
        return jsonify({'error': error}), status
    return jsonify({'message': 'Admin deleted successfully'}), 200


@admin_api_bp.route('/attempts')
def attempts():
    """Newest admin-creation audit records, optionally filtered by status."""
    denied = require_admin_json()
    if denied:
        return denied

    status = (request.args.get('status') or '').strip().upper() or None
    if status and status not in AdminCreationLog.STATUSES:
        return jsonify({'error': 'Invalid status filter'}), 400
    limit = min(max(request.args.get('limit', 50, type=int) or 50, 1), 500)
    return jsonify([entry.to_dict() for entry in recent_creation_attempts(limit, status)])
