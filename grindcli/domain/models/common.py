"""Defines common Value Objects used across different domain contexts.

These objects represent simple values like cache keys and content
fingerprints, ensuring consistency and type safety.
"""

from typing import NewType

# === Caching Context ===
# Using NewType for semantic clarity, although they are strings at runtime.
CacheKey = NewType("CacheKey", str)              # '<namespace>_<md5 hex of identifier>'
Fingerprint = NewType("Fingerprint", str)      # MD5 hex of a stored payload
