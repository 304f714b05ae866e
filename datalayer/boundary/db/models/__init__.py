"""
ORM models registered with Base.metadata.
"""

from datalayer.boundary.db.models.message_model import MessageModel
from datalayer.boundary.db.models.user_model import UserModel

__all__ = ["MessageModel", "UserModel"]
