"""SHA-256 content hashing for post change detection"""

import hashlib


def sha256(content: str) -> str:
    """Return hex-encoded SHA-256 hash of the raw post text."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
