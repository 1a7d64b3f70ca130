"""Infrastructure ORM Models"""

from .user_model import UserModel
from .property_model import PropertyModel

__all__ = [
    'UserModel',
    'PropertyModel',
]
