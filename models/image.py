from db import db

class ImageModel(db.Model):
    __tablename__ = "images"

    id = db.Column(db.Integer, primary_key = True)
    # Public URL of the image in the storage bucket
    file_url = db.Column(db.Text, nullable = False)
    caption = db.Column(db.Text)

    # Up to five classifier tags, filled left to right
    tag1 = db.Column(db.String(100))
    tag2 = db.Column(db.String(100))
    tag3 = db.Column(db.String(100))
    tag4 = db.Column(db.String(100))
    tag5 = db.Column(db.String(100))

    # Foreign Key to link to the Trip model, removed together with its trip
    trip_id = db.Column(db.Integer, db.ForeignKey("trips.id", ondelete = "CASCADE"), nullable = False)
    trip = db.relationship("TripModel", back_populates = "images")
