"""Keyed JSON document store for stories, translations and drafts.

Documents live in a tree addressed by slash-separated paths
(``translation_drafts/<user>/<story>/<draft>``), the same shape as a hosted
realtime database.
"""

import copy
import json
import tempfile
import threading
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional


_key_lock = threading.Lock()
_last_key_time = 0


def generate_key() -> str:
    """Generate a unique child key; keys sort in creation order within a process."""
    global _last_key_time
    with _key_lock:
        _last_key_time = max(time.time_ns(), _last_key_time + 1)
        stamp = _last_key_time
    return f"{stamp:016x}{uuid.uuid4().hex[:8]}"


def split_path(path: str) -> List[str]:
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts:
        raise ValueError("Document path must not be empty")
    return parts


class MemoryDocumentStore:
    """Document store kept entirely in memory."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._root: Dict[str, Any] = copy.deepcopy(data) if data else {}
        self._lock = threading.RLock()

    def push(self, path: str, data: Dict[str, Any]) -> str:
        """Append a child with a generated key under ``path`` and return the key."""
        key = generate_key()
        self.set(f"{path}/{key}", data)
        return key

    def set(self, path: str, data: Any) -> None:
        """Write ``data`` at ``path``, replacing whatever was there."""
        parts = split_path(path)
        with self._lock:
            node = self._root
            for part in parts[:-1]:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[parts[-1]] = copy.deepcopy(data)
            self._persist()

    def get(self, path: str) -> Optional[Any]:
        """Get the document at ``path``, or None if absent."""
        with self._lock:
            node = self._find(path)
            return copy.deepcopy(node)

    def children(self, path: str) -> Dict[str, Any]:
        """Get all direct children under ``path`` (empty if none)."""
        with self._lock:
            node = self._find(path)
            if not isinstance(node, dict):
                return {}
            return copy.deepcopy(node)

    def query(self, path: str, field_name: str, value: Any) -> Dict[str, Any]:
        """Get the children under ``path`` whose ``field_name`` equals ``value``."""
        return {
            key: child
            for key, child in self.children(path).items()
            if isinstance(child, dict) and child.get(field_name) == value
        }

    def delete(self, path: str) -> bool:
        """Delete the document at ``path``. Returns False if it did not exist."""
        parts = split_path(path)
        with self._lock:
            node = self._root
            for part in parts[:-1]:
                node = node.get(part)
                if not isinstance(node, dict):
                    return False
            if parts[-1] not in node:
                return False
            del node[parts[-1]]
            self._persist()
            return True

    def _find(self, path: str) -> Optional[Any]:
        node: Any = self._root
        for part in split_path(path):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def _persist(self) -> None:
        """Hook for durable subclasses; memory needs nothing."""


class JsonFileDocumentStore(MemoryDocumentStore):
    """Document store persisted to a single JSON file."""

    def __init__(self, base_dir: Optional[Path] = None, filename: str = "storylingo.json"):
        self.base_dir = Path(base_dir) if base_dir else Path(tempfile.gettempdir()) / "storylingo"
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.base_dir / filename

        data: Dict[str, Any] = {}
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8"))
        super().__init__(data)

    def _persist(self) -> None:
        """Write the whole tree to disk."""
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(self._root, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)
