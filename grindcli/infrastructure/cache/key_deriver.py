"""Cache key derivation and payload fingerprinting.

Keys are '<namespace>_<md5(identifier)>' so they are stable across runs and
safe to use as file names. Payloads are normalised into JSON-representable
structures before they are stored or hashed; self-referencing containers are
replaced with a marker instead of recursing forever.
"""

import hashlib
import json
import logging
import re
from typing import Any, Optional, Set

from grindcli.domain.models.cache import CIRCULAR_MARKER
from grindcli.domain.models.common import CacheKey, Fingerprint

logger = logging.getLogger(__name__)

# Stored when a payload cannot be hashed at all.
SERIALIZATION_ERROR_FINGERPRINT = Fingerprint("[Error serializing object]")

_SCALARS = (str, int, float, bool, type(None))
_DIGEST_PATTERN = re.compile(r"[0-9a-f]{32}")


def derive_key(namespace: str, identifier: str) -> CacheKey:
    """Builds the cache key for an identifier within a namespace."""
    digest = hashlib.md5(identifier.encode("utf-8")).hexdigest()
    return CacheKey(f"{namespace}_{digest}")


def key_in_namespace(key: str, namespace: str) -> bool:
    """True when `key` was derived for `namespace`.

    The digest after the prefix must be exactly one MD5 hex string, so keys
    of namespace 'a_b' never match namespace 'a'.
    """
    prefix = f"{namespace}_"
    return key.startswith(prefix) and _DIGEST_PATTERN.fullmatch(key[len(prefix):]) is not None


def make_serializable(data: Any, _walking: Optional[Set[int]] = None) -> Any:
    """Returns a JSON-representable copy of `data`.

    Containers that are revisited while they are still being walked (true
    cycles, tracked by identity) become CIRCULAR_MARKER. Shared sub-structures
    that are not cycles are copied normally. Tuples and sets become lists;
    anything else JSON cannot express becomes its str() form.
    """
    if isinstance(data, _SCALARS):
        return data

    if _walking is None:
        _walking = set()

    marker = id(data)
    if marker in _walking:
        return CIRCULAR_MARKER

    if isinstance(data, dict):
        _walking.add(marker)
        try:
            return {str(k): make_serializable(v, _walking) for k, v in data.items()}
        finally:
            _walking.discard(marker)

    if isinstance(data, (list, tuple, set, frozenset)):
        _walking.add(marker)
        try:
            items = [make_serializable(item, _walking) for item in data]
        finally:
            _walking.discard(marker)
        if isinstance(data, (set, frozenset)):
            # Sets have no stable order; sort so fingerprints are deterministic
            items.sort(key=lambda item: json.dumps(item, sort_keys=True, default=str))
        return items

    return str(data)


def safe_stringify(data: Any) -> str:
    """Deterministic compact JSON text of `data` (keys sorted, cycles marked)."""
    return json.dumps(
        make_serializable(data),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def fingerprint(data: Any) -> Fingerprint:
    """MD5 content hash of a payload; never raises."""
    try:
        return Fingerprint(hashlib.md5(safe_stringify(data).encode("utf-8")).hexdigest())
    except Exception as e:
        logger.warning(f"Failed to fingerprint cache payload: {e}")
        return SERIALIZATION_ERROR_FINGERPRINT
