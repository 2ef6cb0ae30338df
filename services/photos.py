"""Photo gallery operations shared by the JSON API and the dashboard."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import FileStorage

from config import ALLOWED_IMAGE_EXTENSIONS
from database import db
from models.photo import Photo
from models.user import User
from services.storage import StorageError, get_storage
from services.upload_security import build_object_key, normalize_category, validate_image_upload

logger = logging.getLogger(__name__)

TEXT_FIELDS = ('description', 'location', 'category', 'photographer')


class PhotoUploadError(Exception):
    def __init__(self, message: str, status_code: int = 400, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


@dataclass
class PhotoPage:
    photos: list
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict:
        return {'total': self.total, 'page': self.page, 'limit': self.limit, 'pages': self.pages}


def parse_date(value) -> datetime | None:
    """Parse an ISO date/datetime; anything unparseable becomes None."""
    if not value or not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith('Z'):
        raw = raw[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def list_photos(category: str | None = None, page: int = 1, limit: int = 10,
                include_unpublished: bool = False) -> PhotoPage:
    query = Photo.query
    if category:
        query = query.filter(Photo.category == category)
    if not include_unpublished:
        query = query.filter(Photo.is_published.is_(True))

    total = query.count()
    photos = (
        query.order_by(Photo.uploaded_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return PhotoPage(photos=photos, total=total, page=page, limit=limit)


def published_categories() -> list[dict]:
    rows = (
        db.session.query(Photo.category, func.count(Photo.id))
        .filter(Photo.is_published.is_(True))
        .group_by(Photo.category)
        .order_by(Photo.category)
        .all()
    )
    return [{'name': name, 'count': count} for name, count in rows]


def create_photo(file: FileStorage | None, form, uploader: User) -> Photo:
    """Validate, push the image to the bucket and record it."""
    if file is None or not file.filename:
        raise PhotoUploadError('No file provided')
    title = (form.get('title') or '').strip()
    if not title:
        raise PhotoUploadError('Title is required')

    validation = validate_image_upload(file, ALLOWED_IMAGE_EXTENSIONS)
    if not validation.ok:
        raise PhotoUploadError(validation.error)

    category = normalize_category(form.get('category'))
    photo_id, key = build_object_key(category, validation.extension)
    data = file.read()

    storage = get_storage()
    try:
        storage.upload(key, data, validation.mime_type)
    except StorageError as exc:
        raise PhotoUploadError('Failed to upload image to storage', status_code=500, details=str(exc))

    photo = Photo(
        id=photo_id,
        title=title,
        description=(form.get('description') or '').strip() or None,
        location=(form.get('location') or '').strip() or None,
        url=storage.public_url(key),
        blob_key=key,
        size=len(data),
        mime_type=validation.mime_type,
        category=category,
        date_taken=parse_date(form.get('dateTaken')),
        photographer=(form.get('photographer') or '').strip() or None,
        uploaded_by_id=uploader.id,
    )
    try:
        db.session.add(photo)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        try:
            storage.delete(key)
        except StorageError:
            logger.warning('Bucket object %s left behind after failed photo insert', key)
        raise
    logger.info('Photo %s uploaded by %s', photo.id, uploader.email)
    return photo


def update_photo(photo: Photo, data: dict) -> Photo:
    """Apply a partial update; the title is mandatory."""
    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise PhotoUploadError('Title is required')

    for field in TEXT_FIELDS:
        if field in data and data[field] is not None and not isinstance(data[field], str):
            raise PhotoUploadError(f'Field {field} must be a string')
    if 'isPublished' in data and not isinstance(data['isPublished'], bool):
        raise PhotoUploadError('Field isPublished must be a boolean')

    photo.title = title.strip()
    if 'description' in data:
        photo.description = (data['description'] or '').strip() or None
    if 'location' in data:
        photo.location = (data['location'] or '').strip() or None
    if 'category' in data:
        photo.category = normalize_category(data['category'])
    if 'isPublished' in data:
        photo.is_published = data['isPublished']
    # An unparseable date keeps the stored one.
    date_taken = parse_date(data.get('dateTaken'))
    if date_taken is not None:
        photo.date_taken = date_taken
    if 'photographer' in data:
        photo.photographer = (data['photographer'] or '').strip() or None
    db.session.commit()
    return photo


def delete_photo(photo: Photo) -> None:
    """Remove the bucket object (best effort) and then the row."""
    try:
        get_storage().delete(photo.blob_key)
    except StorageError:
        logger.warning('Bucket object %s left behind for deleted photo %s', photo.blob_key, photo.id)
    db.session.delete(photo)
    db.session.commit()
