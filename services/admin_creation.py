"""
Admin account creation guarded by a shared admin key.

Every request that passes the payload check leaves exactly one audit record
per outcome (plus a SUSPICIOUS record first when the classifier flags it).
"""
from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.exc import IntegrityError

from database import db
from models.audit_log import AdminCreationLog
from models.user import User, UserCreationInfo
from services.audit import record_creation_attempt
from services.client_classifier import is_suspicious_client
from services.client_info import ClientFingerprint

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('name', 'email', 'password', 'adminKey')

REASON_SUSPICIOUS = 'Request from API client or automation tool'
REASON_INVALID_KEY = 'Invalid admin key'
REASON_EXISTS = 'User already exists'


class AdminCreationError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPayload(AdminCreationError):
    status_code = 400


class InvalidAdminKey(AdminCreationError):
    status_code = 401


class AccountExists(AdminCreationError):
    status_code = 400


class SuspiciousClientBlocked(AdminCreationError):
    status_code = 403


@dataclass
class AdminCreationResult:
    user: User
    suspicious: bool


def _validated_fields(payload) -> dict:
    if not isinstance(payload, Mapping):
        raise InvalidPayload('Invalid JSON format in request body')
    fields = {}
    for key in REQUIRED_FIELDS:
        value = payload.get(key)
        if not isinstance(value, str) or not value.strip():
            raise InvalidPayload(
                'Missing required fields: name, email, password, and adminKey are required'
            )
        fields[key] = value
    fields['name'] = fields['name'].strip()
    fields['email'] = fields['email'].strip().lower()
    return fields


def _find_account(email: str) -> User | None:
    return User.query.filter_by(email=email).first()


def _admin_key_matches(submitted: str, configured: str) -> bool:
    if not configured:
        return False
    return hmac.compare_digest(submitted.encode('utf-8'), configured.encode('utf-8'))


def create_admin(
    payload,
    client: ClientFingerprint,
    *,
    admin_key: str,
    block_suspicious: bool = False,
    classify: Callable[[str, str, str], bool] = is_suspicious_client,
) -> AdminCreationResult:
    """Create an admin account or raise an ``AdminCreationError``.

    Persistence failures other than a duplicate email propagate unchanged.
    """
    fields = _validated_fields(payload)
    email = fields['email']
    suspicious = classify(client.user_agent, client.origin, client.referer)

    if suspicious:
        record_creation_attempt(email, client, AdminCreationLog.STATUS_SUSPICIOUS, REASON_SUSPICIOUS)
        if block_suspicious:
            logger.warning('Blocked admin creation for %s from suspicious client %s', email, client.ip_address)
            raise SuspiciousClientBlocked('Admin creation not allowed from this client')

    if not _admin_key_matches(fields['adminKey'], admin_key):
        record_creation_attempt(email, client, AdminCreationLog.STATUS_FAILED, REASON_INVALID_KEY)
        raise InvalidAdminKey('Unauthorized')

    if _find_account(email) is not None:
        record_creation_attempt(email, client, AdminCreationLog.STATUS_FAILED, REASON_EXISTS)
        raise AccountExists(REASON_EXISTS)

    user = User(name=fields['name'], email=email, role=User.ROLE_ADMIN)
    user.set_password(fields['password'])
    user.creation_info = UserCreationInfo(**client.snapshot())
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent request for the same email.
        db.session.rollback()
        record_creation_attempt(email, client, AdminCreationLog.STATUS_FAILED, REASON_EXISTS)
        raise AccountExists(REASON_EXISTS)

    status = AdminCreationLog.STATUS_SUCCESS_SUSPICIOUS if suspicious else AdminCreationLog.STATUS_SUCCESS
    record_creation_attempt(email, client, status, user_id=user.id)
    return AdminCreationResult(user=user, suspicious=suspicious)
