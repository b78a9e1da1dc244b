'''
----------------------------
Error kinds and the top-level handler
NOT BY USER INTERACTION
----------------------------
'''

import logging

from flask import jsonify

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    error = "server_error"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFoundError(ApiError):
    status_code = 404
    error = "not_found"


# Upload request is missing the file, caption, file name or MIME type
class ImageValidationError(ApiError):
    status_code = 400
    error = "invalid_upload"


# Base for everything that goes wrong after an upload has been validated
class IngestionError(ApiError):
    error = "ingestion_failed"


class ClassificationError(IngestionError):
    error = "classification_failed"


class UploadError(IngestionError):
    error = "upload_failed"


class PersistenceError(IngestionError):
    error = "persistence_failed"


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error("%s: %s", error.error, error.message)

        # Upload validation failures go back to the client as plain text
        if isinstance(error, ImageValidationError):
            return error.message, error.status_code, {"Content-Type": "text/plain; charset=utf-8"}

        return jsonify({"message": error.message, "error": error.error}), error.status_code
