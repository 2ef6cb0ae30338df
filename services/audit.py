"""Helpers for writing the admin-creation audit trail."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from database import db
from models.audit_log import AdminCreationLog
from services.client_info import ClientFingerprint

logger = logging.getLogger(__name__)


def record_creation_attempt(
    email: str,
    client: ClientFingerprint,
    status: str,
    reason: str | None = None,
    user_id: str | None = None,
) -> AdminCreationLog | None:
    """Append a best-effort audit record.

    The row is committed on its own. A failed write is rolled back and logged,
    never raised, so the caller's outcome does not depend on it.
    """
    entry = AdminCreationLog(
        email=email[:255],
        status=status,
        reason=reason,
        user_id=user_id,
        **client.snapshot(),
    )
    try:
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Failed to write admin creation audit record (status=%s, email=%s)', status, email)
        return None
    logger.info('Admin creation attempt %s for %s from %s', status, email, client.ip_address)
    return entry


def recent_creation_attempts(limit: int = 50, status: str | None = None) -> list[AdminCreationLog]:
    query = AdminCreationLog.query
    if status:
        query = query.filter(AdminCreationLog.status == status)
    return query.order_by(AdminCreationLog.created_at.desc()).limit(limit).all()
