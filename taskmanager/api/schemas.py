"""
Response envelopes shared by the routers.

Every response body is a JSON object with ``success`` plus either the
payload or a ``message``.
"""

from __future__ import annotations

from taskmanager.core.models import ApiModel


class ApiResponse(ApiModel):
    success: bool = True


class MessageResponse(ApiResponse):
    message: str


def error_body(message: str) -> dict:
    """Body for a failed request."""
    return {"success": False, "message": message}
