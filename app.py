"""
Flask application entry point for the Guia TNN city guide.
"""
import os
from flask import Flask, jsonify, redirect, request, url_for
from flask_login import LoginManager, current_user
from flask_wtf.csrf import CSRFProtect
from werkzeug.exceptions import HTTPException
from database import db, init_db
import config
import strings as text
from services.logging_setup import configure_error_monitoring, configure_logging
from services.storage import init_storage

csrf = CSRFProtect()
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Faça login para continuar.'
login_manager.login_message_category = 'warning'

ADMIN_BLUEPRINTS = {'dashboard'}
API_PREFIX = '/api/'


def create_app(overrides=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config.get_config())
    if overrides:
        app.config.update(overrides)
    config.validate_runtime(app.config)
    configure_logging(bool(app.config.get('STRUCTURED_LOGGING', True)))
    configure_error_monitoring(app.config.get('SENTRY_DSN', ''))

    init_db(app)
    init_storage(app)

    csrf.init_app(app)
    login_manager.init_app(app)

    from models.user import User

    @login_manager.user_loader
    def load_user(user_id: str):
        if not user_id:
            return None
        return db.session.get(User, user_id)

    @app.context_processor
    def inject_strings():
        return {
            'NAV': text.NAV,
            'is_admin': bool(current_user.is_authenticated and getattr(current_user, 'is_admin', False)),
        }

    from routes.main import main_bp
    from routes.auth import auth_bp
    from routes.dashboard import dashboard_bp
    from routes.admin_api import admin_api_bp
    from routes.photos_api import photos_api_bp

    # JSON endpoints are called with fetch() and carry no form token.
    csrf.exempt(admin_api_bp)
    csrf.exempt(photos_api_bp)

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')
    app.register_blueprint(admin_api_bp, url_prefix='/api/admin')
    app.register_blueprint(photos_api_bp, url_prefix='/api/photos')

    @app.before_request
    def require_admin_for_dashboard():
        """Send anonymous users to login and non-admins home."""
        endpoint = request.endpoint or ''
        blueprint_name = endpoint.split('.', 1)[0]
        if blueprint_name not in ADMIN_BLUEPRINTS:
            return None
        if not current_user.is_authenticated:
            return redirect(url_for('auth.login', next=request.path))
        if not getattr(current_user, 'is_admin', False):
            return redirect(url_for('main.index'))
        return None

    @app.errorhandler(HTTPException)
    def json_errors_for_api(exc: HTTPException):
        """API clients always get a JSON error body."""
        if not request.path.startswith(API_PREFIX):
            return exc
        return jsonify({'error': exc.description or exc.name}), exc.code

    return app


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app = create_app()
    app.run(host='0.0.0.0', port=port, debug=False)
