'''
Image ingestion: classify -> tag -> upload -> persist, one image per request.

Each step runs only after the previous one succeeded. A failure at any point
stops the pipeline, nothing is retried. If the database write fails after the
upload went through, the object stays in the bucket and is only logged.
'''

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from flask import current_app

from errors import ImageValidationError
from services.tags import resolve_tags

logger = logging.getLogger(__name__)


class IngestionState(enum.Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    CLASSIFIED = "classified"
    TAGGED = "tagged"
    UPLOADED = "uploaded"
    PERSISTED = "persisted"
    FAILED = "failed"


@dataclass
class UploadRequest:
    trip_id: int
    file_bytes: Optional[bytes]
    file_name: Optional[str]
    mime_type: Optional[str]
    caption: Optional[str]
    # Authenticated uploader, must own the trip
    owner_id: Optional[int] = None


class ImageIngestionPipeline:

    def __init__(self, vision, storage, repository, folder = "trip_images"):
        self.vision = vision
        self.storage = storage
        self.repository = repository
        self.folder = folder

    def ingest(self, upload):
        state = IngestionState.RECEIVED
        file_url = None

        def advance(new_state):
            logger.debug("Trip %s upload %s: %s -> %s", upload.trip_id, upload.file_name, state.value, new_state.value)
            return new_state

        try:
            self.validate(upload)
            state = advance(IngestionState.VALIDATED)

            # Labels are needed either way, they fill the slots after a landmark
            landmarks = self.vision.detect_landmarks(upload.file_bytes)
            labels = self.vision.detect_labels(upload.file_bytes)
            state = advance(IngestionState.CLASSIFIED)

            tags = resolve_tags(landmarks, labels)
            state = advance(IngestionState.TAGGED)

            file_url = self.storage.upload(upload.file_bytes, upload.mime_type, upload.file_name, self.folder)
            state = advance(IngestionState.UPLOADED)

            image = self.repository.add_image(
                trip_id = upload.trip_id,
                owner_id = upload.owner_id,
                file_url = file_url,
                caption = upload.caption,
                tags = tags
            )
            state = advance(IngestionState.PERSISTED)
        except Exception as e:
            logger.warning("Image ingestion for trip %s failed after %s: %s", upload.trip_id, state.value, e)
            if state is IngestionState.UPLOADED:
                logger.error("Orphaned upload left in storage: %s", file_url)
            state = advance(IngestionState.FAILED)
            raise

        logger.info("Image %s saved to trip %s with tags %s", image.id, upload.trip_id, [t for t in tags if t])
        return image

    @staticmethod
    def validate(upload):
        # Fail fast, before any call to the classifier or the bucket
        if not upload.file_bytes:
            raise ImageValidationError("No file uploaded.")
        if not upload.caption:
            raise ImageValidationError("No caption for file.")
        if not upload.file_name or not upload.mime_type:
            raise ImageValidationError("Uploaded file is missing required properties.")


_pipeline_lock = threading.Lock()


# The app's pipeline, built on first request and shared after that.
# App creation (and so the flask CLI) never touches the cloud clients.
def current_pipeline():
    app = current_app._get_current_object()
    with _pipeline_lock:
        pipeline = app.extensions.get("ingestion_pipeline")
        if pipeline is None:
            pipeline = app.extensions["ingestion_pipeline_factory"]()
            app.extensions["ingestion_pipeline"] = pipeline
    return pipeline
