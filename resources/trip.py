'''
----------------------------
Trip actions
USER INTERACTIONS
----------------------------
'''

from flask import request
from flask.views import MethodView
from flask_smorest import Blueprint, abort
from flask_jwt_extended import jwt_required, get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError, IntegrityError

from db import db
from errors import NotFoundError
from models import TripModel
from schemas import TripSchema, PlainTripSchema
from services.ingestion import UploadRequest, current_pipeline

blp = Blueprint("trips", __name__, description = "Operations on trips")


def get_trip_or_404(trip_id, user_id = None):
    query = TripModel.query.filter_by(id = trip_id)
    # Restrict to the owner when acting on the trip
    if user_id is not None:
        query = query.filter_by(user_id = user_id)
    trip = query.first()
    if trip is None:
        raise NotFoundError(f"No trip: {trip_id}")
    return trip


# Endpoint for generic create and view trips
@blp.route("/trips")
class TripListAndCreate(MethodView):
    @jwt_required()
    @blp.arguments(PlainTripSchema)
    @blp.response(201, TripSchema)
    def post(self, trip_data):
        # Create a new trip for the authenticated user
        trip = TripModel(user_id = int(get_jwt_identity()), **trip_data)

        try:
            db.session.add(trip)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            abort(400, message = "Database integrity error")
        except SQLAlchemyError:
            db.session.rollback()
            abort(500, message = "An error occurred while creating the trip")

        return trip

    # Public feed, newest trips first
    @blp.response(200, TripSchema(many = True))
    def get(self):
        return TripModel.query.order_by(TripModel.id.desc()).all()


# Endpoint related to a specific trip
@blp.route("/trips/<int:trip_id>")
class TripResource(MethodView):
    @blp.response(200, TripSchema)
    def get(self, trip_id):
        return get_trip_or_404(trip_id)

    # Add image to trip: tags come from the Vision API, the file goes to the bucket,
    # then the URL, caption and tags are saved against the trip
    @jwt_required()
    def post(self, trip_id):
        file = request.files.get("file")

        upload = UploadRequest(
            trip_id = trip_id,
            file_bytes = file.read() if file else None,
            file_name = file.filename if file else None,
            mime_type = file.mimetype if file else None,
            caption = request.form.get("caption"),
            owner_id = int(get_jwt_identity())
        )
        image = current_pipeline().ingest(upload)

        return f"File uploaded successfully. URL: {image.file_url}", 201, {"Content-Type": "text/plain; charset=utf-8"}

    @jwt_required()
    def delete(self, trip_id):
        # Images are removed by the foreign key cascade, their blobs stay in the bucket
        trip = get_trip_or_404(trip_id, user_id = int(get_jwt_identity()))

        try:
            db.session.delete(trip)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            abort(500, message = f"An error occurred while deleting the trip: {str(e)}")

        return {"deleted": trip_id}
