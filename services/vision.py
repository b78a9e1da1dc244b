'''
Google Cloud Vision client wrapper (landmark + label detection)
NOT BY USER INTERACTION
'''

import logging

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import vision

from errors import ClassificationError

logger = logging.getLogger(__name__)


# Built once at startup and shared by every request
class VisionGateway:

    def __init__(self, client):
        self._client = client

    @classmethod
    def from_config(cls, config):
        # Credentials come from the environment (GOOGLE_APPLICATION_CREDENTIALS or ADC)
        client_options = {}
        if config.get("GOOGLE_CLOUD_PROJECT_ID"):
            client_options["quota_project_id"] = config["GOOGLE_CLOUD_PROJECT_ID"]
        return cls(vision.ImageAnnotatorClient(client_options = client_options or None))

    def detect_landmarks(self, content: bytes) -> list[str]:
        # Landmark descriptions in the order the service ranks them, empty if none found
        response = self._annotate("landmark", self._client.landmark_detection, content)
        return [landmark.description for landmark in response.landmark_annotations]

    def detect_labels(self, content: bytes) -> list[str]:
        # Generic labels, most confident first
        response = self._annotate("label", self._client.label_detection, content)
        return [label.description for label in response.label_annotations]

    def _annotate(self, kind, detect, content):
        try:
            response = detect(image = vision.Image(content = content), retry = None)
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            logger.warning("Vision %s detection failed: %s", kind, e)
            raise ClassificationError(f"Failed to classify image ({kind} detection): {e}") from e

        # The API reports per-image failures inside an otherwise successful response
        if response.error.message:
            logger.warning("Vision %s detection returned an error: %s", kind, response.error.message)
            raise ClassificationError(f"Failed to classify image ({kind} detection): {response.error.message}")

        return response
