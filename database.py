"""
Database setup and initialization for the Guia TNN city guide.
"""
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event as sa_event

db = SQLAlchemy()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


def init_db(app):
    """Initialize the database with the Flask app."""
    db.init_app(app)
    with app.app_context():
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
            sa_event.listen(db.engine, 'connect', _enable_sqlite_foreign_keys)
        # Import all models to register them with SQLAlchemy
        from models import AdminCreationLog, Photo, User, UserCreationInfo  # noqa: F401
        db.create_all()
