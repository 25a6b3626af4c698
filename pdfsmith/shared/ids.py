"""
ID generation helpers.
"""

import uuid


def generate_id(prefix: str) -> str:
    """Generate a prefixed random identifier."""
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


def generate_request_id() -> str:
    return generate_id("req")
