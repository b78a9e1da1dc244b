from marshmallow import Schema, fields, validate

# --- Plain Schemas: Core attributes, for basic input / ID assignments ---

# User login
class UserLoginSchema(Schema):
    username = fields.Str(required = True, validate = validate.Length(min = 1, max = 25))
    # Password is load_only, so it's never dumped.
    password = fields.Str(required = True, load_only = True, validate = validate.Length(min = 5, max = 256))

class PlainUserSchema(Schema):
    id = fields.Int(dump_only = True)
    username = fields.Str(dump_only = True)
    first_name = fields.Str(dump_only = True)
    last_name = fields.Str(dump_only = True)
    profile_image = fields.Str(dump_only = True)
    about = fields.Str(dump_only = True)

# Images attached to a trip, with the classifier tags
class PlainImageSchema(Schema):
    id = fields.Int(dump_only = True)
    # Public bucket URL
    file_url = fields.Str(dump_only = True)
    caption = fields.Str(dump_only = True)
    tag1 = fields.Str(dump_only = True)
    tag2 = fields.Str(dump_only = True)
    tag3 = fields.Str(dump_only = True)
    tag4 = fields.Str(dump_only = True)
    tag5 = fields.Str(dump_only = True)

# Trip creation
class PlainTripSchema(Schema):
    id = fields.Int(dump_only = True)
    title = fields.Str(required = True, validate = validate.Length(min = 1, max = 500))

# --- Full Schemas: Inherits from Plain, but adds class inter-relationships ---

class ImageSchema(PlainImageSchema):
    trip_id = fields.Int(dump_only = True)

class TripSchema(PlainTripSchema):
    user_id = fields.Int(dump_only = True)
    # Owner details for the public feed
    username = fields.Str(dump_only = True)
    profile_image = fields.Str(dump_only = True)
    images = fields.List(fields.Nested(PlainImageSchema()), dump_only = True)

# --- Schemas for Specific Operations ---

# Registration comes in as a (possibly multipart) form, so the profile image can ride along
class UserRegisterSchema(Schema):
    username = fields.Str(required = True, validate = validate.Length(min = 1, max = 25))
    password = fields.Str(required = True, load_only = True, validate = validate.Length(min = 5, max = 256))
    first_name = fields.Str(validate = validate.Length(min = 1, max = 25))
    last_name = fields.Str(validate = validate.Length(min = 1, max = 25))
    about = fields.Str(validate = validate.Length(max = 5000))

class TokenSchema(Schema):
    token = fields.Str(dump_only = True)
