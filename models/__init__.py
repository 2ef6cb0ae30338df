"""
SQLAlchemy models for the Guia TNN city guide.
"""
from .user import User, UserCreationInfo
from .audit_log import AdminCreationLog
from .photo import Photo

__all__ = [
    'User',
    'UserCreationInfo',
    'AdminCreationLog',
    'Photo',
]
