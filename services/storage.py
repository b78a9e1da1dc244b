'''
Google Cloud Storage uploads for trip and profile images
NOT BY USER INTERACTION
'''

import logging
import time

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage
from werkzeug.utils import secure_filename

from errors import UploadError

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_TIMEOUT = 10


class StorageGateway:

    def __init__(self, client, bucket_name, timeout = DEFAULT_UPLOAD_TIMEOUT):
        if not bucket_name:
            raise ValueError("GCS bucket name is not configured")
        self._bucket = client.bucket(bucket_name)
        self.bucket_name = bucket_name
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        client = storage.Client(project = config.get("GOOGLE_CLOUD_PROJECT_ID"))
        return cls(
            client,
            config.get("GCS_BUCKET_NAME"),
            timeout = config.get("STORAGE_UPLOAD_TIMEOUT", DEFAULT_UPLOAD_TIMEOUT)
        )

    # Uploads raw bytes under "<folder>/<name>-<epoch millis>" and returns the public URL
    def upload(self, content: bytes, content_type: str, key_hint: str, folder: str) -> str:
        safe_name = secure_filename(key_hint or "") or "upload"
        blob_name = f"{folder}/{safe_name}-{int(time.time() * 1000)}"

        # Single attempt: retry = None turns off the SDK default retry on 429/5xx
        blob = self._bucket.blob(blob_name)
        try:
            blob.upload_from_string(content, content_type = content_type, timeout = self.timeout, retry = None)
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            logger.error("GCS upload of %s failed: %s", blob_name, e)
            raise UploadError(f"Failed to upload image to cloud storage: {e}") from e

        logger.info("Uploaded %s to bucket %s", blob_name, self.bucket_name)
        return blob.public_url

    # Best-effort removal of a previously uploaded object, given its public URL
    def delete(self, url: str) -> bool:
        prefix = f"https://storage.googleapis.com/{self.bucket_name}/"
        if not url or not url.startswith(prefix):
            logger.warning("Not a URL in bucket %s, skipping delete: %s", self.bucket_name, url)
            return False

        blob_name = url[len(prefix):]
        try:
            self._bucket.blob(blob_name).delete(timeout = self.timeout, retry = None)
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            logger.warning("GCS delete of %s failed: %s", blob_name, e)
            return False

        logger.info("Deleted %s from bucket %s", blob_name, self.bucket_name)
        return True
