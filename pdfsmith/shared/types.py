"""
Shared types used across modules.
"""

from dataclasses import dataclass


@dataclass
class RequestContext:
    """Per-request context attached to log records."""
    request_id: str
    actor: str = "system"
