# By having it in __init__.py, we can use "from models import UserModel, TripModel"
from models.user import UserModel
from models.trip import TripModel
from models.image import ImageModel
from models.tokens_blocklist import TokenBlocklist
