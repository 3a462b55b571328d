"""
Flask application factory.

Creates and configures the app, wires the outlet repository and registers
all blueprints.
"""
import logging

from flask import Flask, jsonify


def create_app(repository=None):
    """
    Create and configure the Flask application.

    repository defaults to the SQL-backed store; tests pass an
    InMemoryRepository instead.
    """
    from outlet_ops.config import SECRET_KEY
    from outlet_ops.logging_config import configure_logging
    from outlet_ops.services.outlets import OutletNotFound
    from outlet_ops.services.preview_store import PreviewNotFound
    from outlet_ops.services.repository import RepositoryError, SqlRepository

    app = Flask(__name__)
    configure_logging(app)
    app.secret_key = SECRET_KEY

    app.config['OUTLET_REPOSITORY'] = repository if repository is not None else SqlRepository()

    logger = logging.getLogger('outlet_ops.app')

    @app.errorhandler(OutletNotFound)
    def _outlet_not_found(e):
        return jsonify({'error': f'Outlet {e} not found'}), 404

    @app.errorhandler(PreviewNotFound)
    def _preview_not_found(e):
        return jsonify({'error': 'Import preview not found or expired'}), 404

    @app.errorhandler(RepositoryError)
    def _repository_error(e):
        logger.error("Repository error: %s", e)
        return jsonify({'error': 'Could not save outlets'}), 500

    # Register blueprints
    from outlet_ops.routes.dashboard import bp as dashboard_bp
    from outlet_ops.routes.outlets import bp as outlets_bp
    from outlet_ops.routes.imports import bp as imports_bp

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(outlets_bp)
    app.register_blueprint(imports_bp)

    # Import models so Base.metadata knows about them.
    # Schema is managed by Alembic — no create_all() here.
    import importlib
    importlib.import_module('outlet_ops.models.db_outlet')

    return app
