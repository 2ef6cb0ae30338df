"""JSON API for the photo gallery."""
import logging
from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from database import db
from models.photo import Photo
from routes.auth import require_admin_json
from services.photos import (
    PhotoUploadError,
    create_photo,
    delete_photo,
    list_photos,
    published_categories,
    update_photo,
)

logger = logging.getLogger(__name__)

photos_api_bp = Blueprint('photos_api', __name__)


def _admin_requested() -> bool:
    return request.args.get('admin') == 'true'


def page_args(default_limit: int, max_limit: int) -> tuple[int, int]:
    page = max(1, request.args.get('page', 1, type=int) or 1)
    limit = request.args.get('limit', default_limit, type=int) or default_limit
    return page, min(max(limit, 1), max_limit)


@photos_api_bp.route('', methods=['GET'])
def index():
    """Paginated photo list; unpublished photos only for admin requests."""
    is_admin = _admin_requested()
    if is_admin:
        denied = require_admin_json()
        if denied:
            return denied

    page, limit = page_args(
        current_app.config.get('PHOTOS_PAGE_SIZE', 10),
        current_app.config.get('PHOTOS_MAX_PAGE_SIZE', 100),
    )
    category = (request.args.get('category') or '').strip() or None
    try:
        result = list_photos(category=category, page=page, limit=limit, include_unpublished=is_admin)
    except SQLAlchemyError:
        logger.exception('Error fetching photos')
        return jsonify({'error': 'Failed to fetch photos'}), 500

    return jsonify({
        'photos': [photo.to_dict() for photo in result.photos],
        'pagination': result.pagination(),
    })


@photos_api_bp.route('/categories')
def categories():
    try:
        return jsonify(published_categories())
    except SQLAlchemyError:
        logger.exception('Error fetching photo categories')
        return jsonify({'error': 'Failed to fetch photo categories'}), 500


@photos_api_bp.route('/<photo_id>', methods=['GET'])
def detail(photo_id):
    is_admin = _admin_requested()
    if is_admin:
        denied = require_admin_json()
        if denied:
            return denied

    photo = db.session.get(Photo, photo_id)
    if photo is None or (not is_admin and not photo.is_published):
        return jsonify({'error': 'Photo not found'}), 404
    return jsonify(photo.to_dict())


@photos_api_bp.route('/<photo_id>', methods=['PATCH'])
def update(photo_id):
    denied = require_admin_json()
    if denied:
        return denied

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON format in request body'}), 400
    if not isinstance(data.get('title'), str) or not data['title'].strip():
        return jsonify({'error': 'Title is required'}), 400

    photo = db.session.get(Photo, photo_id)
    if photo is None:
        return jsonify({'error': 'Photo not found'}), 404

    try:
        photo = update_photo(photo, data)
    except PhotoUploadError as exc:
        return jsonify({'error': exc.message}), exc.status_code
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error updating photo %s', photo_id)
        return jsonify({'error': 'Failed to update photo'}), 500

    return jsonify({'message': 'Photo updated successfully', 'photo': photo.to_dict()})


@photos_api_bp.route('/<photo_id>', methods=['DELETE'])
def delete(photo_id):
    denied = require_admin_json()
    if denied:
        return denied

    photo = db.session.get(Photo, photo_id)
    if photo is None:
        return jsonify({'error': 'Photo not found'}), 404

    try:
        delete_photo(photo)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error deleting photo %s', photo_id)
        return jsonify({'error': 'Failed to delete photo'}), 500
    return jsonify({'message': 'Photo deleted successfully'})


@photos_api_bp.route('/upload', methods=['POST'])
def upload():
    denied = require_admin_json()
    if denied:
        return denied

    try:
        photo = create_photo(request.files.get('file'), request.form, current_user)
    except PhotoUploadError as exc:
        body = {'error': exc.message}
        if exc.details:
            body['details'] = exc.details
        return jsonify(body), exc.status_code
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception('Error uploading photo')
        return jsonify({'error': 'Failed to upload photo', 'details': exc.__class__.__name__}), 500

    return jsonify({'message': 'Photo uploaded successfully', 'photo': photo.to_dict()})
