'''
Trip image persistence used by the ingestion pipeline
'''

import logging

from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError, PersistenceError
from models import TripModel, ImageModel

logger = logging.getLogger(__name__)


class TripImageRepository:

    def add_image(self, trip_id, owner_id, file_url, caption, tags):
        # Trip must exist and belong to the uploader
        trip = TripModel.query.filter_by(id = trip_id, user_id = owner_id).first()
        if trip is None:
            raise NotFoundError(f"No trip: {trip_id}")

        image = ImageModel(
            file_url = file_url,
            caption = caption,
            trip_id = trip.id,
            **tags.as_columns()
        )

        try:
            db.session.add(image)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Database error while saving image %s for trip %s: %s", file_url, trip_id, e)
            raise PersistenceError("Database error occurred while saving image") from e

        return image
