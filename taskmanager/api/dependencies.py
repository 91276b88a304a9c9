"""
Service dependencies.

Services are built once in ``create_app`` and live on ``app.state``.
"""

from __future__ import annotations

from fastapi import Request

from taskmanager.services import TaskService, UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service
