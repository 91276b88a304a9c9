"""
Services - workflows shared by the HTTP handlers.
"""

from taskmanager.services.tasks import TaskService
from taskmanager.services.users import UserService

__all__ = [
    "TaskService",
    "UserService",
]
