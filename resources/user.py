'''
----------------------------
User/account actions
USER INTERACTIONS
----------------------------
'''

from flask.views import MethodView
from flask_smorest import Blueprint, abort
from flask_jwt_extended import get_jwt_identity, jwt_required
from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError
from schemas import PlainUserSchema, TripSchema
from models import UserModel, TripModel

blp = Blueprint("users", __name__, description = "Operations on users")


def get_user_or_404(username):
    user = UserModel.query.filter_by(username = username).first()
    if user is None:
        raise NotFoundError(f"No user: {username}")
    return user


@blp.route("/users")
class UserList(MethodView):
    @blp.response(200, PlainUserSchema(many = True))
    def get(self):
        return UserModel.query.order_by(UserModel.username).all()


@blp.route("/users/<string:username>")
class User(MethodView):
    @blp.response(200, PlainUserSchema)
    def get(self, username):
        return get_user_or_404(username)

    # Delete user, their trips and images go with them
    @jwt_required()
    def delete(self, username):
        user = get_user_or_404(username)
        if get_jwt_identity() != str(user.id):
            abort(403, message = "You are not authorized to delete this user")

        try:
            db.session.delete(user)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            abort(500, message = "An error occurred while deleting the user")

        return {"deleted": username}


@blp.route("/users/<string:username>/trips")
class UserTrips(MethodView):
    @blp.response(200, TripSchema(many = True))
    def get(self, username):
        user = get_user_or_404(username)
        return user.trips.order_by(TripModel.id).all()
