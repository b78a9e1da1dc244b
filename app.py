import logging
import os

from flask import Flask, jsonify
from flask_smorest import Api
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

from db import db
from errors import register_error_handlers
from models.tokens_blocklist import TokenBlocklist
from clean_up import cleanup_revoked_tokens_command
from services import ImageIngestionPipeline, StorageGateway, TripImageRepository, VisionGateway

from resources.auth import blp as AuthBlueprint
from resources.user import blp as UserBlueprint
from resources.trip import blp as TripBlueprint
from resources.image import blp as ImageBlueprint

from datetime import timedelta
from flask_cors import CORS

DEFAULT_PROFILE_IMAGE_URL = "https://storage.googleapis.com/traveler-images/profile_images/defaultUser.jpeg"
# Cloud Vision caps inline image content at 10 MB
DEFAULT_MAX_CONTENT_LENGTH = 10 * 1024 * 1024


def create_app(db_url = None, vision_gateway = None, storage_gateway = None):
    app = Flask(__name__)

    logging.basicConfig(
        level = os.getenv("LOG_LEVEL", "INFO").upper(),
        format = "%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    FRONTEND_URL = os.getenv("FRONTEND_URL")

    CORS(
        app,
        resources={r"/*": {
            "origins": [FRONTEND_URL] if FRONTEND_URL else [],
            "supports_credentials": True,
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization", "Accept"],
            "expose_headers": ["Content-Type", "Authorization"],
            "max_age": 86400
        }},
    )

    app.config["PROPAGATE_EXCEPTIONS"] = True
    app.config["API_TITLE"] = "Traveler -- Trip Journal API"
    app.config["API_VERSION"] = "v1"
    app.config["OPENAPI_VERSION"] = "3.0.3"
    app.config["OPENAPI_URL_PREFIX"] = "/"
    app.config["OPENAPI_SWAGGER_UI_PATH"] = "/swagger-ui"
    app.config["OPENAPI_SWAGGER_UI_URL"] = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"
    app.config["SQLALCHEMY_DATABASE_URI"] = db_url or os.getenv("DATABASE_URL", "sqlite:///data.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    # Google Cloud: Vision for tagging, Storage for the image files
    app.config["GCS_BUCKET_NAME"] = os.getenv("GCS_BUCKET_NAME")
    app.config["GOOGLE_CLOUD_PROJECT_ID"] = os.getenv("GOOGLE_CLOUD_PROJECT_ID")
    app.config["STORAGE_UPLOAD_TIMEOUT"] = float(os.getenv("STORAGE_UPLOAD_TIMEOUT", "10"))
    app.config["TRIP_IMAGES_FOLDER"] = os.getenv("TRIP_IMAGES_FOLDER", "trip_images")
    app.config["PROFILE_IMAGES_FOLDER"] = os.getenv("PROFILE_IMAGES_FOLDER", "profile_images")
    app.config["DEFAULT_PROFILE_IMAGE_URL"] = os.getenv("DEFAULT_PROFILE_IMAGE_URL", DEFAULT_PROFILE_IMAGE_URL)
    # Uploads are buffered in memory, Werkzeug answers 413 above this size
    app.config["MAX_CONTENT_LENGTH"] = int(os.getenv("MAX_CONTENT_LENGTH", str(DEFAULT_MAX_CONTENT_LENGTH)))
    # Set a secret key used for signing the JWT
    # Prevents tampering with JWTs from others
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY")
    # Expiry for full access tokens
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(hours = 3)

    # Connects Flask app to SQLAlchemy
    db.init_app(app)
    api = Api(app)

    # Initialize flask migrate
    migrate = Migrate(app, db)

    jwt = JWTManager(app)

    # External clients are created once, on the first request that needs them,
    # and shared by every request after that. Tests pass in fakes instead
    def build_pipeline():
        return ImageIngestionPipeline(
            vision = vision_gateway or VisionGateway.from_config(app.config),
            storage = storage_gateway or StorageGateway.from_config(app.config),
            repository = TripImageRepository(),
            folder = app.config["TRIP_IMAGES_FOLDER"]
        )

    app.extensions["ingestion_pipeline_factory"] = build_pipeline
    app.extensions["ingestion_pipeline"] = build_pipeline() if vision_gateway and storage_gateway else None

    # Whenever we receive a JWT, this function checks if it is inside blocklist
    # If returns True, the request is terminated (access is revoked)
    @jwt.token_in_blocklist_loader
    def check_if_token_in_blocklist(jwt_header, jwt_payload):
        return TokenBlocklist.is_revoked(jwt_payload["jti"])

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return (
            jsonify(
                {"message": "Token has been revoked", "error": "token_revoked"}
            ),
            401
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return (jsonify({"message": "Token has expired", "error": "token_expired"}), 401)

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return (jsonify({"message": "Signature verification failed", "error": "invalid_token"}), 401)

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return (
            jsonify(
                {
                    "message": "Request does not contain access token",
                    "error": "authorization_required"
                }
            ),
            401
        )

    register_error_handlers(app)
    app.cli.add_command(cleanup_revoked_tokens_command)

    api.register_blueprint(AuthBlueprint)
    api.register_blueprint(UserBlueprint)
    api.register_blueprint(TripBlueprint)
    api.register_blueprint(ImageBlueprint)

    return app
