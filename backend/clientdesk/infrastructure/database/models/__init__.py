from .user import UserModel
from .department import DepartmentModel
from .client import ClientModel
from .case import CaseModel

__all__ = [
    "UserModel",
    "DepartmentModel",
    "ClientModel",
    "CaseModel",
]
