"""
Photo gallery entries. The image bytes live in the storage bucket; this row
keeps the public URL and the object key needed to delete it.
"""
from datetime import datetime
from database import db
from models.user import new_id


class Photo(db.Model):
    """A gallery photo uploaded by an admin."""

    __tablename__ = 'photos'
    __table_args__ = (
        db.Index('ix_photos_uploaded_at', 'uploaded_at'),
        db.Index('ix_photos_category_published', 'category', 'is_published'),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    location = db.Column(db.String(200), nullable=True)
    url = db.Column(db.String(1024), nullable=False)
    blob_key = db.Column(db.String(512), nullable=False, unique=True)
    size = db.Column(db.Integer, nullable=False, default=0)
    mime_type = db.Column(db.String(100), nullable=True)
    category = db.Column(db.String(80), nullable=False, default='general')
    is_published = db.Column(db.Boolean, nullable=False, default=True)
    date_taken = db.Column(db.DateTime, nullable=True)
    photographer = db.Column(db.String(200), nullable=True)

    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    uploaded_by_id = db.Column(db.String(32), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    uploaded_by = db.relationship('User', back_populates='photos')

    def __repr__(self):
        return f'<Photo {self.title} ({self.category})>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location,
            'url': self.url,
            'blobKey': self.blob_key,
            'size': self.size,
            'mimeType': self.mime_type,
            'category': self.category,
            'isPublished': bool(self.is_published),
            'dateTaken': self.date_taken.isoformat() if self.date_taken else None,
            'photographer': self.photographer,
            'uploadedAt': self.uploaded_at.isoformat() if self.uploaded_at else None,
            'uploadedBy': (
                {'id': self.uploaded_by.id, 'name': self.uploaded_by.name}
                if self.uploaded_by else None
            ),
        }
