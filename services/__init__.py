from services.ingestion import ImageIngestionPipeline, IngestionState, UploadRequest, current_pipeline
from services.repository import TripImageRepository
from services.storage import StorageGateway
from services.tags import TagSet, resolve_tags, TAG_SLOTS
from services.vision import VisionGateway
