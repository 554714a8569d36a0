"""
Content hashing — the fingerprint every reconciliation decision rests on.

SHA-256 over the UTF-8 bytes of the content, as a hex digest. Text is
encoded before hashing so that ``hash_content(s) == hash_content(s.encode())``;
generated templates (str) and disk reads (bytes) hash identically.
"""

from __future__ import annotations

import hashlib


def hash_content(content: str | bytes) -> str:
    """Return the SHA-256 hex digest of ``content``."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()
