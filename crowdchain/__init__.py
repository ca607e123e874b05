# crowdchain/__init__.py

import logging
import click
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from .config import Config

db = SQLAlchemy()
migrate = Migrate()


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging to show INFO level messages. Service modules log
    # through child loggers of app.logger ('crowdchain.*').
    app.logger.setLevel(logging.INFO)
    if not any(getattr(h, '_crowdchain', False) for h in app.logger.handlers):
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        formatter = logging.Formatter('[%(asctime)s] %(levelname)s: %(message)s')
        handler.setFormatter(formatter)
        handler._crowdchain = True
        app.logger.addHandler(handler)

    if not app.config.get('JWT_SECRET_KEY'):
        raise RuntimeError("JWT_SECRET_KEY (or SECRET_KEY) must be configured")

    db.init_app(app)
    migrate.init_app(app, db)

    CORS(app, origins=app.config['CORS_ORIGINS'])

    # --- JSON ERROR HANDLERS ---
    @app.errorhandler(RequestEntityTooLarge)
    def request_too_large(e):
        return jsonify({
            "success": False,
            "error": "Upload too large.",
            "error_code": 413,
        }), 413

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({
            "success": False,
            "error": e.description,
            "error_code": e.code,
        }), e.code

    # --- REGISTER BLUEPRINTS ---
    from .api.applications import bp as applications_bp
    from .api.status import bp as status_bp
    from .auth import bp as auth_bp

    app.register_blueprint(applications_bp, url_prefix='/api')
    app.register_blueprint(status_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')

    with app.app_context():
        from . import models  # noqa: F401  (registers the tables on db.metadata)

    @app.cli.command('init-db')
    def init_db_command():
        """Creates all tables directly, bypassing migrations (development only)."""
        db.create_all()
        click.echo('Initialized the database.')

    return app
