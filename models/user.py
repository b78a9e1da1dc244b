from db import db

class UserModel(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key = True)
    # Unique username, also used to look users up in URLs
    username = db.Column(db.String(25), unique = True, nullable = False)
    # pbkdf2_sha256 hash, never the raw password
    password = db.Column(db.Text, nullable = False)
    first_name = db.Column(db.String(25))
    last_name = db.Column(db.String(25))
    # Public URL of the profile picture in the bucket (or the default avatar)
    profile_image = db.Column(db.Text)
    about = db.Column(db.Text)

    # One user can have many trips
    # Trips delete if account is deleted
    trips = db.relationship(
        "TripModel",
        back_populates = "user",
        lazy = "dynamic",
        cascade = "all, delete-orphan",
        passive_deletes = True
    )
