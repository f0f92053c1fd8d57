"""
Namespace allocation for packaging runs.

Format: {unix_ms}-{uuid4 hex}, e.g. 1700000000000-9f1c0b6e2d6a4f0c8a3e5b7d1c2e4f60.
The millisecond prefix keeps namespaces sortable by creation time; the uuid4
suffix (122 random bits) makes two allocations in the same millisecond distinct.
"""

import re
import time
import uuid

# Caller-supplied namespaces (retry under an existing one) must be a single safe segment
NAMESPACE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def allocate_namespace() -> str:
    """Return a fresh namespace for one packaging job."""
    return f"{time.time_ns() // 1_000_000}-{uuid.uuid4().hex}"


def is_valid_namespace(namespace: str) -> bool:
    return bool(namespace) and NAMESPACE_PATTERN.match(namespace) is not None
