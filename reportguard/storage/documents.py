"""
documents.py – JSON-file document store used by the ledger, counters and account directory.

Each collection lives in ``<data_dir>/<collection>.json`` as a mapping of document id
to document. Every mutation runs load → modify → atomic write while holding the
store lock, so increments, compare-and-set and unique-keyed creates are atomic for
all threads sharing the store instance.
"""

import os, json, tempfile, shutil, threading, uuid
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from reportguard.errors import DuplicateDocument, NotFound, StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25


class DocumentList(BaseModel):
    total: int
    documents: List[Dict[str, Any]]


def _matches(document: Dict[str, Any], filters: Dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in filters.items())


class JsonDocumentStore:
    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)
        self._lock = threading.RLock()

    # ────────────────────────────────
    # JSON helpers
    # ────────────────────────────────
    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _load(self, collection: str) -> Dict[str, Dict[str, Any]]:
        path = self._path(collection)
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read().strip()
        except OSError as exc:
            raise StoreUnavailable(f"Cannot read collection {collection!r}: {exc}") from exc
        if not content:
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise StoreUnavailable(f"Collection {collection!r} is corrupted: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreUnavailable(f"Collection {collection!r} is not a JSON object.")
        return data

    def _save(self, collection: str, data: Dict[str, Dict[str, Any]]) -> None:
        """Write the collection atomically (temp file + move)."""
        path = self._path(collection)
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            tmp_fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
            os.close(tmp_fd)
        except OSError as exc:
            raise StoreUnavailable(f"Cannot write collection {collection!r}: {exc}") from exc

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            shutil.move(tmp_path, path)
        except OSError as exc:
            raise StoreUnavailable(f"Cannot write collection {collection!r}: {exc}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _require(self, data: Dict[str, Dict[str, Any]], collection: str, document_id: str) -> Dict[str, Any]:
        document = data.get(document_id)
        if document is None:
            raise NotFound(collection, document_id)
        return document

    # ────────────────────────────────
    # Reads
    # ────────────────────────────────
    def get(self, collection: str, document_id: str) -> Dict[str, Any]:
        with self._lock:
            return dict(self._require(self._load(collection), collection, document_id))

    def list(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> DocumentList:
        """Equality-filtered query. ``total`` counts every match, ``documents`` is one page."""
        filters = filters or {}
        with self._lock:
            matches = [dict(d) for d in self._load(collection).values() if _matches(d, filters)]
        return DocumentList(total=len(matches), documents=matches[offset: offset + limit])

    # ────────────────────────────────
    # Writes
    # ────────────────────────────────
    def create(
        self,
        collection: str,
        fields: Dict[str, Any],
        document_id: Optional[str] = None,
        unique_on: Sequence[str] = (),
    ) -> Dict[str, Any]:
        """Insert a document. ``unique_on`` names fields whose combined values must be unique."""
        with self._lock:
            data = self._load(collection)
            if unique_on:
                keys = {key: fields.get(key) for key in unique_on}
                if any(_matches(d, keys) for d in data.values()):
                    raise DuplicateDocument(collection, keys)

            document_id = document_id or str(uuid.uuid4())
            if document_id in data:
                raise DuplicateDocument(collection, {"id": document_id})

            document = {**fields, "id": document_id}
            data[document_id] = document
            self._save(collection, data)
            return dict(document)

    def update(self, collection: str, document_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            data = self._load(collection)
            document = self._require(data, collection, document_id)
            document.update(fields)
            self._save(collection, data)
            return dict(document)

    def increment(self, collection: str, document_id: str, field: str, amount: int = 1) -> int:
        """Atomically add ``amount`` to a numeric field and return the new value."""
        with self._lock:
            data = self._load(collection)
            document = self._require(data, collection, document_id)
            document[field] = (document.get(field) or 0) + amount
            self._save(collection, data)
            return document[field]

    def increment_once(
        self,
        collection: str,
        document_id: str,
        field: str,
        marker_field: str,
        marker: str,
        amount: int = 1,
    ) -> Tuple[int, bool]:
        """
        Increment ``field`` unless ``marker`` is already listed in ``marker_field``.
        Counter and marker are written together. Returns (value, applied).
        """
        with self._lock:
            data = self._load(collection)
            document = self._require(data, collection, document_id)
            markers = document.get(marker_field) or []
            if marker in markers:
                return document.get(field) or 0, False
            document[field] = (document.get(field) or 0) + amount
            document[marker_field] = markers + [marker]
            self._save(collection, data)
            return document[field], True

    def compare_and_set(
        self,
        collection: str,
        document_id: str,
        field: str,
        expected: Any,
        value: Any,
        extra: Optional[Dict[str, Any]] = None,
        default: Any = None,
    ) -> bool:
        """
        Set ``field`` to ``value`` only if it currently equals ``expected``
        (a missing field reads as ``default``). Returns True if this call
        performed the write.
        """
        with self._lock:
            data = self._load(collection)
            document = self._require(data, collection, document_id)
            if document.get(field, default) != expected:
                return False
            document[field] = value
            if extra:
                document.update(extra)
            self._save(collection, data)
            return True

    def seed(self, collection: str, documents: List[Dict[str, Any]]) -> None:
        """Insert or replace documents by id (fixtures and operator imports)."""
        with self._lock:
            data = self._load(collection)
            for document in documents:
                data[document["id"]] = dict(document)
            self._save(collection, data)
        logger.debug("Seeded %d documents into %s", len(documents), collection)
