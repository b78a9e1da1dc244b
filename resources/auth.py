'''
----------------------------
Registration, login and logout
USER INTERACTIONS
----------------------------
'''

import logging

from flask import current_app, request
from flask.views import MethodView
from flask_smorest import Blueprint, abort
# Hashes the password that the user enters
# and saves the scrambled password into the database
from passlib.hash import pbkdf2_sha256
from flask_jwt_extended import create_access_token, jwt_required, get_jwt
from sqlalchemy.exc import SQLAlchemyError

from db import db
from schemas import UserRegisterSchema, UserLoginSchema, TokenSchema
from models import UserModel, TokenBlocklist
from services.ingestion import current_pipeline

logger = logging.getLogger(__name__)

blp = Blueprint("auth", __name__, url_prefix = "/auth", description = "Registration and access tokens")


def _create_token(user):
    # Identity is the user id, the username rides along for the client
    return create_access_token(identity = str(user.id), additional_claims = {"username": user.username})


def _profile_image_url(username):
    file = request.files.get("profile_image")
    if not file or not file.filename:
        return current_app.config["DEFAULT_PROFILE_IMAGE_URL"]

    # Upload failures propagate as UploadError, no user row gets written
    pipeline = current_pipeline()
    return pipeline.storage.upload(
        file.read(),
        file.mimetype,
        f"{username}-{file.filename}",
        current_app.config["PROFILE_IMAGES_FOLDER"]
    )


@blp.route("/register")
class UserRegister(MethodView):
    @blp.arguments(UserRegisterSchema, location = "form")
    @blp.response(201, TokenSchema)
    def post(self, user_data):
        if UserModel.query.filter(UserModel.username == user_data["username"]).first():
            abort(409, message = f"Duplicate username: {user_data['username']}")

        profile_image = _profile_image_url(user_data["username"])

        user = UserModel(
            username = user_data["username"],
            password = pbkdf2_sha256.hash(user_data["password"]),
            first_name = user_data.get("first_name"),
            last_name = user_data.get("last_name"),
            about = user_data.get("about"),
            profile_image = profile_image
        )
        try:
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            abort(500, message = "An error occurred while registering the user")

        logger.info("Registered user %s", user.username)
        return {"token": _create_token(user)}


@blp.route("/token")
class UserLogin(MethodView):
    @blp.arguments(UserLoginSchema)
    @blp.response(200, TokenSchema)
    def post(self, user_data):
        user = UserModel.query.filter(
            UserModel.username == user_data["username"]
        ).first()

        # user must not be null, and verify must return True
        if user and pbkdf2_sha256.verify(user_data["password"], user.password):
            return {"token": _create_token(user)}

        abort(401, message = "Invalid username/password")


@blp.route("/logout")
class UserLogout(MethodView):
    @jwt_required()
    def post(self):
        TokenBlocklist.revoke(get_jwt()["jti"])
        return {"message": "Logged out successfully"}
