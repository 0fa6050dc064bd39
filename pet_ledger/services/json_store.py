# pet_ledger/services/json_store.py
"""
JSON file document store used as the development fallback for Firestore.

It mirrors the small part of the Firestore client API the services use
(collection / document / get / set / update / delete / where / stream), so
a service works the same against either backend. Each collection is one
JSON file under the data directory, mapping document ids to documents.
"""

import json
import logging
import os
import threading
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pet_ledger.utils.datetime_utils import DateTimeUtils


def _json_default(obj: Any) -> str:
    if isinstance(obj, datetime):
        return DateTimeUtils.to_iso_string(obj)
    if isinstance(obj, date):
        return DateTimeUtils.to_date_string(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class JsonDocumentSnapshot:
    def __init__(self, doc_id: str, data: Optional[Dict[str, Any]]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        if self._data is None:
            return None
        return json.loads(json.dumps(self._data))


class JsonDocumentReference:
    def __init__(self, collection: "JsonCollectionReference", doc_id: str):
        self._collection = collection
        self.id = doc_id

    def get(self) -> JsonDocumentSnapshot:
        return JsonDocumentSnapshot(self.id, self._collection._read().get(self.id))

    def set(self, data: Dict[str, Any]) -> None:
        with self._collection._store._lock:
            documents = self._collection._read()
            documents[self.id] = data
            self._collection._write(documents)

    def update(self, data: Dict[str, Any]) -> None:
        with self._collection._store._lock:
            documents = self._collection._read()
            if self.id not in documents:
                raise FileNotFoundError(f"No document to update: {self._collection.name}/{self.id}")
            documents[self.id].update(data)
            self._collection._write(documents)

    def delete(self) -> None:
        with self._collection._store._lock:
            documents = self._collection._read()
            if documents.pop(self.id, None) is not None:
                self._collection._write(documents)


class JsonQuery:
    _OPERATORS = {
        '==': lambda a, b: a == b,
        '!=': lambda a, b: a != b,
        'in': lambda a, b: a in b,
    }

    def __init__(self, collection: "JsonCollectionReference", filters: List[Tuple[str, str, Any]]):
        self._collection = collection
        self._filters = filters

    def where(self, field_path: str, op_string: str, value: Any) -> "JsonQuery":
        if op_string not in self._OPERATORS:
            raise ValueError(f"Unsupported query operator: {op_string}")
        return JsonQuery(self._collection, self._filters + [(field_path, op_string, value)])

    def stream(self) -> Iterator[JsonDocumentSnapshot]:
        for doc_id, data in self._collection._read().items():
            if all(self._OPERATORS[op](data.get(field_path), value) for field_path, op, value in self._filters):
                yield JsonDocumentSnapshot(doc_id, data)


class JsonCollectionReference(JsonQuery):
    def __init__(self, store: "JsonDocumentStore", name: str):
        super().__init__(self, [])
        self._store = store
        self.name = name
        self.path = os.path.join(store.data_dir, f"{name}.json")

    def document(self, doc_id: str) -> JsonDocumentReference:
        return JsonDocumentReference(self, doc_id)

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write(self, documents: Dict[str, Dict[str, Any]]) -> None:
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(documents, f, indent=2, ensure_ascii=False, default=_json_default)
        os.replace(tmp_path, self.path)


class JsonDocumentStore:
    """Drop-in stand-in for firestore.client() backed by JSON files."""

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self._lock = threading.RLock()
        os.makedirs(self.data_dir, exist_ok=True)
        logging.info(f"JsonDocumentStore initialized at {self.data_dir}")

    def collection(self, name: str) -> JsonCollectionReference:
        return JsonCollectionReference(self, name)

    def collections(self) -> List[JsonCollectionReference]:
        names = sorted(f[:-5] for f in os.listdir(self.data_dir) if f.endswith('.json'))
        return [self.collection(name) for name in names]
