"""Append-only log of admin-creation attempts."""
from datetime import datetime
from database import db
from models.user import new_id


class AdminCreationLog(db.Model):
    """One row per admin-creation request outcome. Never updated."""

    __tablename__ = 'admin_creation_logs'
    __table_args__ = (
        db.Index('ix_admin_creation_logs_created_at', 'created_at'),
        db.Index('ix_admin_creation_logs_status', 'status'),
        db.Index('ix_admin_creation_logs_email', 'email'),
    )

    STATUS_SUCCESS = 'SUCCESS'
    STATUS_SUCCESS_SUSPICIOUS = 'SUCCESS_SUSPICIOUS'
    STATUS_FAILED = 'FAILED'
    STATUS_SUSPICIOUS = 'SUSPICIOUS'
    STATUSES = (STATUS_SUCCESS, STATUS_SUCCESS_SUSPICIOUS, STATUS_FAILED, STATUS_SUSPICIOUS)

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    email = db.Column(db.String(255), nullable=False)
    ip_address = db.Column(db.String(64), nullable=False, default='unknown')
    user_agent = db.Column(db.Text, nullable=False, default='unknown')
    browser = db.Column(db.String(120), nullable=True)
    operating_system = db.Column(db.String(120), nullable=True)
    device = db.Column(db.String(40), nullable=True)
    origin = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(20), nullable=False)
    reason = db.Column(db.String(255), nullable=True)
    # Back-reference only; survives deletion of the account.
    user_id = db.Column(db.String(32), nullable=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<AdminCreationLog {self.email} {self.status}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'ipAddress': self.ip_address,
            'userAgent': self.user_agent,
            'browser': self.browser,
            'operatingSystem': self.operating_system,
            'device': self.device,
            'origin': self.origin,
            'status': self.status,
            'reason': self.reason,
            'userId': self.user_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
