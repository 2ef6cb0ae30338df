"""
User model for admin authentication, plus the metadata captured when an
admin account is created.
"""
import uuid
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash
from database import db


def new_id() -> str:
    return uuid.uuid4().hex


class User(UserMixin, db.Model):
    """Site account; only admins can reach the dashboard."""

    __tablename__ = 'users'

    ROLE_ADMIN = 'admin'
    ROLE_USER = 'user'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    creation_info = db.relationship('UserCreationInfo', back_populates='user', uselist=False)
    photos = db.relationship('Photo', back_populates='uploaded_by', passive_deletes=True)

    def __repr__(self):
        return f'<User {self.email} ({self.role})>'

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self, include_creation_info: bool = True) -> dict:
        payload = {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
        if include_creation_info:
            payload['creationInfo'] = self.creation_info.to_dict() if self.creation_info else None
        return payload


class UserCreationInfo(db.Model):
    """Browser/OS/device snapshot taken when an admin account is created."""

    __tablename__ = 'user_creation_info'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    user_id = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=False, unique=True)
    ip_address = db.Column(db.String(64), nullable=False, default='unknown')
    user_agent = db.Column(db.Text, nullable=False, default='unknown')
    browser = db.Column(db.String(120), nullable=True)
    operating_system = db.Column(db.String(120), nullable=True)
    device = db.Column(db.String(40), nullable=True)
    origin = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship('User', back_populates='creation_info')

    def to_dict(self) -> dict:
        return {
            'ipAddress': self.ip_address,
            'browser': self.browser,
            'operatingSystem': self.operating_system,
            'device': self.device,
            'origin': self.origin,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
