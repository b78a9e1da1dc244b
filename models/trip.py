from db import db

class TripModel(db.Model):
    __tablename__ = "trips"

    id = db.Column(db.Integer, primary_key = True)
    title = db.Column(db.Text, nullable = False)
    # Owner of the trip, removing the user removes their trips
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete = "CASCADE"), nullable = False)
    user = db.relationship("UserModel", back_populates = "trips")
    # Images attached to the trip, oldest first
    images = db.relationship(
        "ImageModel",
        back_populates = "trip",
        order_by = "ImageModel.id",
        cascade = "all, delete-orphan",
        passive_deletes = True
    )

    @property
    def username(self):
        return self.user.username if self.user else None

    @property
    def profile_image(self):
        return self.user.profile_image if self.user else None
