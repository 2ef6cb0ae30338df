"""Upload validation for gallery images."""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from config import DEFAULT_PHOTO_CATEGORY


_JPEG_MAGIC = b'\xff\xd8\xff'
_PNG_MAGIC = b'\x89PNG\r\n\x1a\n'
_GIF_MAGICS = (b'GIF87a', b'GIF89a')

_MIME_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'gif': 'image/gif',
    'webp': 'image/webp',
}

_CATEGORY_UNSAFE = re.compile(r'[^a-z0-9_-]+')


@dataclass
class UploadValidationResult:
    ok: bool
    error: str = ''
    extension: str = ''
    mime_type: str = ''


def _content_matches(extension: str, sniff: bytes) -> bool:
    if extension in {'jpg', 'jpeg'}:
        return sniff.startswith(_JPEG_MAGIC)
    if extension == 'png':
        return sniff.startswith(_PNG_MAGIC)
    if extension == 'gif':
        return sniff.startswith(_GIF_MAGICS)
    if extension == 'webp':
        return sniff[:4] == b'RIFF' and sniff[8:12] == b'WEBP'
    return False


def validate_image_upload(file: FileStorage, allowed_extensions: set[str]) -> UploadValidationResult:
    filename = secure_filename(file.filename or '')
    if not filename or '.' not in filename:
        return UploadValidationResult(ok=False, error='Missing filename.')

    extension = filename.rsplit('.', 1)[1].lower()
    if extension not in allowed_extensions:
        return UploadValidationResult(ok=False, error='Invalid file extension.')

    sniff = file.stream.read(12)
    file.stream.seek(0)
    if not _content_matches(extension, sniff):
        return UploadValidationResult(ok=False, error=f'File content is not a valid .{extension} image.')

    return UploadValidationResult(ok=True, extension=extension, mime_type=_MIME_TYPES[extension])


def normalize_category(category: str | None) -> str:
    cleaned = _CATEGORY_UNSAFE.sub('-', (category or '').strip().lower()).strip('-')
    return cleaned or DEFAULT_PHOTO_CATEGORY


def build_object_key(category: str, extension: str) -> tuple[str, str]:
    """Return ``(photo_id, key)`` where key is ``<category>/<photo_id>.<ext>``."""
    photo_id = uuid.uuid4().hex
    return photo_id, f'{category}/{photo_id}.{extension}'
