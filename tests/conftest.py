"""
tests/conftest.py
"""
from __future__ import annotations

from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from app import create_app
from database import db
from models import User
from services.storage import EXTENSION_KEY, StorageError

ADMIN_KEY = 'test-admin-key-0123456789'
ADMIN_PASSWORD = 'correct-horse-battery'

CHROME_UA = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
CURL_UA = 'curl/7.68.0'

# Smallest byte prefixes that pass the image magic checks.
PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32
JPEG_BYTES = b'\xff\xd8\xff\xe0' + b'\x00' * 32


class FakeStorage:
    """In-memory stand-in for the photo bucket."""

    bucket = 'test-bucket'

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, key, data, content_type=None):
        if self.fail_upload:
            raise StorageError('bucket unavailable')
        self.objects[key] = data

    def delete(self, key):
        if self.fail_delete:
            raise StorageError('bucket unavailable')
        self.deleted.append(key)
        self.objects.pop(key, None)

    def public_url(self, key):
        return f'https://cdn.test/{self.bucket}/{key}'


@pytest.fixture
def app() -> Generator[Flask, None, None]:
    """A fresh app on an in-memory database for every test."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'WTF_CSRF_ENABLED': False,
        'ADMIN_CREATION_KEY': ADMIN_KEY,
        'BLOCK_SUSPICIOUS_CLIENTS': False,
        'STRUCTURED_LOGGING': False,
        'SENTRY_DSN': '',
    })
    app.extensions[EXTENSION_KEY] = FakeStorage()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def storage(app: Flask) -> FakeStorage:
    return app.extensions[EXTENSION_KEY]


def make_user(app: Flask, email: str = 'admin@guia-tnn.com', role: str = User.ROLE_ADMIN,
              name: str = 'Admin', password: str = ADMIN_PASSWORD) -> str:
    """Insert a user directly and return its id."""
    with app.app_context():
        user = User(name=name, email=email, role=role)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id


def login(client: FlaskClient, email: str = 'admin@guia-tnn.com', password: str = ADMIN_PASSWORD):
    return client.post('/login', data={'email': email, 'password': password})


@pytest.fixture
def admin_client(app: Flask, client: FlaskClient) -> FlaskClient:
    """Test client logged in as an admin."""
    make_user(app)
    rv = login(client)
    assert rv.status_code == 302
    return client
