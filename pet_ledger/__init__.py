# pet_ledger/__init__.py

# =====================================================================================
# 1. Environment variables (loaded before anything reads them)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Module imports
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from flask_jwt_extended.exceptions import WrongTokenError

# - configuration
from pet_ledger.core.config import config_by_name

# - API blueprints
from pet_ledger.api.auth.routes import auth_bp
from pet_ledger.api.animals.routes import animals_bp
from pet_ledger.api.events.routes import events_bp
from pet_ledger.api.settings.routes import settings_bp
from pet_ledger.api.exports.routes import exports_bp

# - services
from pet_ledger.services.firestore_service import init_firebase, init_document_store
from pet_ledger.api.auth.services import AuthService
from pet_ledger.api.settings.services import SettingsService
from pet_ledger.api.animals.services import AnimalService
from pet_ledger.api.events.services import EventService
from pet_ledger.api.exports.services import ExportService

from pet_ledger.commands import register_commands


def create_app(config_name=None, config_overrides=None):
    """
    Flask application factory.

    config_name picks a class from config_by_name (FLASK_ENV by default);
    config_overrides is applied on top, e.g. a temporary DATA_DIR in tests.
    """
    # =====================================================================================
    # 3. Flask app and base configuration
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    if config_overrides:
        app.config.update(config_overrides)
    app.json.ensure_ascii = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("JWT_SECRET_KEY is not set")

    # =====================================================================================
    # 4. Extensions and external services
    # =====================================================================================
    jwt = JWTManager(app)

    # ID token verification needs Firebase Admin even with the JSON backend
    if app.config.get('VERIFY_ID_TOKENS'):
        init_firebase(app)
    db = init_document_store(app)
    logging.info(f"Document store backend: {app.config['DATA_BACKEND']}")

    # =====================================================================================
    # 5. Service instances stored in 'app.services' (dependency injection)
    # =====================================================================================
    app.services = {}

    # 5-1. services without dependencies on other services
    app.services['auth'] = AuthService(db)
    app.services['settings'] = SettingsService(db)

    # 5-2. domain services that receive other services
    app.services['animals'] = AnimalService(db, settings_service=app.services['settings'])
    app.services['events'] = EventService(animal_service=app.services['animals'])
    app.services['exports'] = ExportService(
        animal_service=app.services['animals'],
        settings_service=app.services['settings']
    )

    # 5-3. JWT callbacks
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return app.services['auth'].is_token_revoked(jwt_payload)

    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return jsonify({"error_code": "UNAUTHORIZED", "message": "Authentication required"}), 401

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return jsonify({"error_code": "INVALID_TOKEN", "message": "Authentication required"}), 401

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return jsonify({"error_code": "TOKEN_EXPIRED", "message": "Authentication required"}), 401

    @jwt.revoked_token_loader
    def handle_revoked_token(jwt_header, jwt_payload):
        return jsonify({"error_code": "TOKEN_REVOKED", "message": "Authentication required"}), 401

    # an access token sent where a refresh token is required (or the reverse)
    @app.errorhandler(WrongTokenError)
    def handle_wrong_token_type(err):
        return jsonify({"error_code": "WRONG_TOKEN_TYPE", "message": "Authentication required"}), 401

    # =====================================================================================
    # 6. Blueprints
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(settings_bp, url_prefix='/api/settings')
    app.register_blueprint(exports_bp, url_prefix='/api/export')

    # - animals and their timeline share the /api/animals prefix
    app.register_blueprint(animals_bp, url_prefix='/api/animals')
    app.register_blueprint(events_bp, url_prefix='/api/animals')

    register_commands(app)

    # =====================================================================================
    # 7. Global error handlers
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # anything not handled by a route or the handlers above
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "An unexpected server error occurred."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. Logging and return
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
