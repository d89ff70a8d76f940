"""File-based cache tier with a per-namespace metadata index.

Layout under the cache root:

    <root>/<namespace>/<key>.json      {data, timestamp, ttl, size, key}
    <root>/<namespace>/metadata.json   {key: {key, timestamp, ttl, size, fingerprint, accessed}}

Every document is written to a temp file first and moved into place with
os.replace, so a crash mid-write leaves the previous version intact.
"""

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from grindcli.domain.models.cache import (
    CacheEntry,
    CacheMetadata,
    CacheWriteError,
    InvalidNamespaceError,
)
from grindcli.domain.models.common import CacheKey, Fingerprint

logger = logging.getLogger(__name__)

METADATA_FILE_NAME = "metadata.json"
ENTRY_SUFFIX = ".json"
TEMP_SUFFIX = ".tmp"


def is_valid_namespace(namespace: str) -> bool:
    """True when `namespace` names exactly one directory directly under the root.

    Rejects '', '.', '..', absolute or drive-qualified paths and anything
    containing a path separator or NUL.
    """
    if not namespace or namespace in (".", "..") or "\0" in namespace:
        return False
    return Path(namespace).name == namespace


class FileTier:
    """Durable cache tier: one JSON file per entry, one metadata document per namespace."""

    def __init__(self, root: Union[Path, str]):
        # Ensure root is a Path object for cross-platform compatibility
        self.root = Path(root) if not isinstance(root, Path) else root

    # --- Paths ---

    def namespace_dir(self, namespace: str) -> Path:
        """Directory of a namespace.

        Raises:
            InvalidNamespaceError: If the namespace would escape the root.
        """
        if not is_valid_namespace(namespace):
            raise InvalidNamespaceError(namespace)
        return self.root / namespace

    def entry_path(self, namespace: str, key: CacheKey) -> Path:
        return self.namespace_dir(namespace) / f"{key}{ENTRY_SUFFIX}"

    def metadata_path(self, namespace: str) -> Path:
        return self.namespace_dir(namespace) / METADATA_FILE_NAME

    # --- Directories ---

    def ensure_namespaces(self, namespaces: Iterable[str]) -> None:
        """Creates the root and the given namespace directories if missing.

        Raises:
            OSError: If a directory cannot be created.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        for namespace in namespaces:
            self.namespace_dir(namespace).mkdir(parents=True, exist_ok=True)

    def discover_namespaces(self) -> List[str]:
        """Names of the namespace directories currently under the root."""
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    # --- Metadata ---

    def load_metadata(self, namespace: str) -> Dict[CacheKey, CacheMetadata]:
        """Reads a namespace's metadata document.

        A missing, unparsable or malformed document yields an empty mapping;
        later writes rebuild it.
        """
        path = self.metadata_path(namespace)
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                raise ValueError(f"expected an object, got {type(raw).__name__}")
            return {
                CacheKey(key): CacheMetadata.from_dict(record)
                for key, record in raw.items()
            }
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load cache metadata for namespace '{namespace}': {e}")
            return {}

    def save_metadata(self, namespace: str, records: Dict[CacheKey, CacheMetadata]) -> None:
        """Rewrites a namespace's metadata document in full.

        Raises:
            CacheWriteError: If the document cannot be written.
        """
        document = {key: record.to_dict() for key, record in records.items()}
        try:
            self._write_atomic(self.metadata_path(namespace), json.dumps(document, indent=2))
        except OSError as e:
            raise CacheWriteError(namespace, METADATA_FILE_NAME, e) from e

    def touch(self, namespace: str, key: CacheKey, accessed: float) -> None:
        """Records a read of `key`. Failures are logged, not raised."""
        records = self.load_metadata(namespace)
        record = records.get(key)
        if record is None:
            return
        record.accessed = accessed
        try:
            self.save_metadata(namespace, records)
        except CacheWriteError as e:
            logger.error(str(e))

    # --- Entries ---

    def read(self, namespace: str, key: CacheKey) -> Optional[Tuple[CacheEntry, int]]:
        """Loads an entry and the byte length of its file.

        Returns None when the file is missing or cannot be parsed.
        """
        path = self.entry_path(namespace, key)
        if not path.exists():
            return None
        try:
            content = path.read_bytes()
            raw = json.loads(content.decode("utf-8"))
            if not isinstance(raw, dict):
                raise ValueError(f"expected an object, got {type(raw).__name__}")
            return CacheEntry.from_dict(raw), len(content)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to read or parse cache file {path}: {e}")
            return None

    def write(self, namespace: str, entry: CacheEntry, fingerprint: Fingerprint) -> CacheEntry:
        """Persists an entry and upserts its metadata record.

        `entry.size` is set to the serialized byte length before writing. If
        the metadata document cannot be saved, the entry file is removed again.

        Raises:
            CacheWriteError: If serialization or any file operation fails.
        """
        try:
            entry.size = 0
            entry.size = len(self._serialize(entry))
            content = self._serialize(entry)
        except (TypeError, ValueError) as e:
            raise CacheWriteError(namespace, entry.key, e) from e

        try:
            self.namespace_dir(namespace).mkdir(parents=True, exist_ok=True)
            self._write_atomic(self.entry_path(namespace, entry.key), content)
        except OSError as e:
            raise CacheWriteError(namespace, entry.key, e) from e

        records = self.load_metadata(namespace)
        records[entry.key] = CacheMetadata(
            key=entry.key,
            timestamp=entry.timestamp,
            ttl=entry.ttl,
            size=entry.size,
            fingerprint=fingerprint,
            accessed=entry.timestamp,
        )
        try:
            self.save_metadata(namespace, records)
        except CacheWriteError:
            # An entry file without a metadata record is never swept or reported
            self.remove_file(namespace, entry.key)
            raise
        logger.debug(f"Stored cache file: key={entry.key}, namespace={namespace}, size={entry.size}")
        return entry

    def remove_file(self, namespace: str, key: CacheKey) -> None:
        """Deletes an entry file only (metadata untouched). Failures are logged."""
        try:
            self.entry_path(namespace, key).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete cache file for key {key}: {e}")

    def delete(self, namespace: str, key: CacheKey) -> None:
        """Deletes an entry file and its metadata record."""
        self.remove_file(namespace, key)
        records = self.load_metadata(namespace)
        if records.pop(key, None) is None:
            return
        try:
            self.save_metadata(namespace, records)
        except CacheWriteError as e:
            logger.error(str(e))

    def delete_namespace(self, namespace: str) -> None:
        """Removes a namespace directory recursively and recreates it empty."""
        path = self.namespace_dir(namespace)
        if path.exists():
            shutil.rmtree(path, ignore_errors=True)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to recreate cache namespace directory {path}: {e}")

    # --- Helpers ---

    @staticmethod
    def _serialize(entry: CacheEntry) -> bytes:
        return json.dumps(entry.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")

    @staticmethod
    def _write_atomic(path: Path, content: Union[str, bytes]) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        temp_path = path.with_suffix(TEMP_SUFFIX)
        try:
            with open(temp_path, "wb") as f:
                f.write(content)
            # os.replace is atomic on both Windows and POSIX
            os.replace(str(temp_path), str(path))
        except OSError:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass  # Ignore cleanup errors
            raise
