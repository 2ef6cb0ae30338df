"""
Photo bucket access through boto3.

Works against AWS S3 or any S3-compatible endpoint (Supabase Storage, MinIO)
via STORAGE_ENDPOINT_URL.
"""
from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'photo_storage'


class StorageError(RuntimeError):
    """Raised when the bucket rejects or fails an operation."""


class PhotoStorage:
    def __init__(self, bucket: str, client_factory, public_base_url: str = '', cache_control: str = ''):
        self.bucket = bucket
        self._client_factory = client_factory
        self._client = None
        self.public_base_url = public_base_url.rstrip('/')
        self.cache_control = cache_control

    @property
    def client(self):
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        extra = {}
        if content_type:
            extra['ContentType'] = content_type
        if self.cache_control:
            extra['CacheControl'] = self.cache_control
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as exc:
            logger.error('Upload to s3://%s/%s failed: %s', self.bucket, key, exc)
            raise StorageError(str(exc)) from exc
        logger.info('Uploaded s3://%s/%s (%d bytes)', self.bucket, key, len(data))

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error('Delete of s3://%s/%s failed: %s', self.bucket, key, exc)
            raise StorageError(str(exc)) from exc
        logger.info('Deleted s3://%s/%s', self.bucket, key)

    def public_url(self, key: str) -> str:
        return f'{self.public_base_url}/{self.bucket}/{key}'


def _client_factory(config):
    def build():
        session = boto3.Session(
            aws_access_key_id=config.get('STORAGE_ACCESS_KEY_ID') or None,
            aws_secret_access_key=config.get('STORAGE_SECRET_ACCESS_KEY') or None,
            region_name=config.get('STORAGE_REGION') or None,
        )
        return session.client('s3', endpoint_url=config.get('STORAGE_ENDPOINT_URL') or None)
    return build


def init_storage(app) -> PhotoStorage:
    config = app.config
    bucket = config['STORAGE_BUCKET']
    public_base = (
        config.get('STORAGE_PUBLIC_BASE_URL')
        or config.get('STORAGE_ENDPOINT_URL')
        or 'https://s3.amazonaws.com'
    )
    storage = PhotoStorage(
        bucket=bucket,
        client_factory=_client_factory(config),
        public_base_url=public_base,
        cache_control=config.get('STORAGE_CACHE_CONTROL', ''),
    )
    app.extensions[EXTENSION_KEY] = storage
    return storage


def get_storage() -> PhotoStorage:
    return current_app.extensions[EXTENSION_KEY]
