import json
import uuid
from pathlib import Path
from typing import Dict, Any, List, Optional

from .errors import StoreError

# This file holds the document stores and the collection names they serve.

PRODUCTS = "products"
ORDERS = "orders"
COLLECTIONS = (PRODUCTS, ORDERS)


class MemoryDocumentStore:
    """Documents kept in per-collection dicts for the lifetime of the process."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}

    def connect(self) -> None:
        return None

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        try:
            return self._collections[name]
        except KeyError:
            raise StoreError(f"unknown collection: {name}")

    def find(self, collection: str) -> List[Dict[str, Any]]:
        return [dict(doc) for doc in self._collection(collection).values()]

    def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        docs = self._collection(collection)
        doc = dict(document)
        doc["id"] = uuid.uuid4().hex
        docs[doc["id"]] = doc
        return dict(doc)

    def clear(self) -> None:
        for docs in self._collections.values():
            docs.clear()


class JsonFileDocumentStore:
    """One pretty-printed JSON array per collection under a directory."""

    def __init__(self, directory: str):
        self.storage_dir = Path(directory)

    def connect(self) -> None:
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            for name in COLLECTIONS:
                path = self._file_path(name)
                if not path.exists():
                    self._write(name, [])
        except OSError as e:
            raise StoreError(f"cannot open store at {self.storage_dir}: {e}")

    def _file_path(self, collection: str) -> Path:
        if collection not in COLLECTIONS:
            raise StoreError(f"unknown collection: {collection}")
        return self.storage_dir / f"{collection}.json"

    def _read(self, collection: str) -> List[Dict[str, Any]]:
        path = self._file_path(collection)
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read().strip()
        except OSError as e:
            raise StoreError(f"cannot read {collection}: {e}")
        if text == "":
            return []
        try:
            data = json.loads(text)
        except ValueError as e:
            raise StoreError(f"corrupted {collection} file: {e}")
        if not isinstance(data, list):
            raise StoreError(f"corrupted {collection} file: expected a list")
        return data

    def _write(self, collection: str, documents: List[Dict[str, Any]]) -> None:
        path = self._file_path(collection)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(documents, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StoreError(f"cannot write {collection}: {e}")

    def find(self, collection: str) -> List[Dict[str, Any]]:
        return self._read(collection)

    def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        docs = self._read(collection)
        doc = dict(document)
        doc["id"] = uuid.uuid4().hex
        docs.append(doc)
        self._write(collection, docs)
        return dict(doc)

    def clear(self) -> None:
        for name in COLLECTIONS:
            self._write(name, [])


def build_store(store_path: Optional[str] = None):
    if store_path:
        return JsonFileDocumentStore(store_path)
    return MemoryDocumentStore()
