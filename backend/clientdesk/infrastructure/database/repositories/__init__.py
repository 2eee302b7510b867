from .client_repository import SQLAlchemyClientRepository
from .user_repository import SQLAlchemyUserRepository

__all__ = [
    "SQLAlchemyClientRepository",
    "SQLAlchemyUserRepository",
]
