'''
----------------------------
Trip image actions
(uploads go through POST /trips/<id>, see resources/trip.py)
USER INTERACTION
----------------------------
'''

import logging

from flask.views import MethodView
from flask_smorest import Blueprint, abort
from flask_jwt_extended import jwt_required, get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError
from models import TripModel, ImageModel
from resources.trip import get_trip_or_404
from schemas import ImageSchema
from services.ingestion import current_pipeline

logger = logging.getLogger(__name__)

blp = Blueprint("images", __name__, description = "Operations on trip images")


@blp.route("/trips/<int:trip_id>/images")
class TripImageList(MethodView):
    # All images of a trip, oldest first
    @blp.response(200, ImageSchema(many = True))
    def get(self, trip_id):
        return get_trip_or_404(trip_id).images


# Manage individual images
@blp.route("/images/<int:image_id>")
class ImageResource(MethodView):
    @blp.response(200, ImageSchema)
    def get(self, image_id):
        image = db.session.get(ImageModel, image_id)
        if image is None:
            raise NotFoundError(f"No image: {image_id}")
        return image

    @jwt_required()
    def delete(self, image_id):
        # Delete a specific image (row from DB, then file from GCS)
        current_user_id = int(get_jwt_identity())
        image = db.session.query(ImageModel).join(TripModel).filter(
            ImageModel.id == image_id,
            TripModel.user_id == current_user_id
        ).first()
        if image is None:
            raise NotFoundError(f"No image: {image_id}")

        file_url = image.file_url

        try:
            db.session.delete(image)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            abort(500, message = f"Database error deleting image: {str(e)}")

        # The row is gone either way, a failed bucket delete only leaves an orphan
        storage = current_pipeline().storage
        if not storage.delete(file_url):
            logger.warning("Image %s deleted from DB, but GCS file deletion failed or was skipped: %s", image_id, file_url)

        return {"deleted": image_id}
