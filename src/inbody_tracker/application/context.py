"""
application.context - Request-scoped session context.

Every service call receives its context explicitly. Two concurrent users
get two different SessionContext instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4


@dataclass
class SessionContext:
    """Per-request/session context passed through all layers.

    Attributes:
        owner_id:    Authenticated user the request acts for (from the JWT).
        role:        "client", "coach" or "admin" as issued by the auth service.
        request_id:  Unique per request, for tracing/logging.
    """
    owner_id: str
    role: str = "client"
    request_id: str = field(default_factory=lambda: uuid4().hex)
