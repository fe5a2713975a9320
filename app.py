"""Flask application module for the Bookstore API."""
import logging
from datetime import timedelta
from flask import Flask, jsonify
from flask_cors import CORS
from config import Settings
from errors import register_error_handlers
from auth.services import init_oauth
from auth.views import auth_bp # Imports the blueprint object from the auth module
from routes.books import books_bp
from routes.authors import authors_bp
from swagger import docs_bp


def create_app(settings=None):
    """
    Build the Flask app from explicit settings.
    Falls back to the environment when no settings are given.
    """
    if settings is None:
        settings = Settings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    app = Flask(__name__)

    # Use app.config to set config connection details
    app.config['MONGO_URI'] = settings.mongo_uri
    app.config['DB_NAME'] = settings.db_name
    app.config['SECRET_KEY'] = settings.secret_key
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(seconds=settings.session_ttl_seconds)
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['SESSION_COOKIE_SECURE'] = settings.cookie_secure
    app.config['SETTINGS'] = settings

    # Let browser clients on other origins call the API
    CORS(app, origins=settings.cors_origins)

    # Build the OAuth adapters for every configured provider
    init_oauth(app, settings)

    # Register the blueprints with the main app, applying a URL prefix
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(books_bp, url_prefix='/api/books')
    app.register_blueprint(authors_bp, url_prefix='/api/authors')
    app.register_blueprint(docs_bp, url_prefix='/api-docs')

    register_error_handlers(app)

    @app.route('/')
    def index():
        return jsonify({"message": "Bookstore API is running"}), 200

    return app


app = create_app()

if __name__ == '__main__':
    app.run(port=app.config['SETTINGS'].port)
