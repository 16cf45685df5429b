import copy
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

# In-memory document store. Collections hold plain dicts keyed by id and
# mimic the small slice of a document database the workflows need.

ASCENDING = 1
DESCENDING = -1


def _matches(doc: Dict[str, Any], flt: Dict[str, Any]) -> bool:
    for key, expected in flt.items():
        actual = doc.get(key)
        # array fields match when any element equals the expected value
        if isinstance(actual, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


def _sort_key(doc: Dict[str, Any], field: str):
    value = doc.get(field)
    # missing values sort after present ones
    return (value is None, "" if value is None else value)


def _project(doc: Dict[str, Any], projection: Optional[Sequence[str]]) -> Dict[str, Any]:
    if projection is None:
        return copy.deepcopy(doc)
    out = {"id": doc["id"]}
    for field in projection:
        if field in doc:
            out[field] = copy.deepcopy(doc[field])
    return out


class Collection:
    def __init__(self, name: str):
        self.name = name
        self._docs: Dict[str, Dict[str, Any]] = {}

    async def find(
        self,
        flt: Optional[Dict[str, Any]] = None,
        projection: Optional[Sequence[str]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
    ) -> List[Dict[str, Any]]:
        out = [d for d in self._docs.values() if _matches(d, flt or {})]
        # apply sort keys last to first so the first key wins
        for field, direction in reversed(sort or []):
            out.sort(key=lambda d: _sort_key(d, field), reverse=direction == DESCENDING)
        return [_project(d, projection) for d in out]

    async def find_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self._docs.get(doc_id)
        if doc is None:
            return None
        return copy.deepcopy(doc)

    async def find_by_ids(self, ids: Iterable[str]) -> List[Dict[str, Any]]:
        # unknown ids are dropped, order follows the requested ids
        return [copy.deepcopy(self._docs[i]) for i in ids if i in self._docs]

    async def insert_one(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        doc_id = uuid.uuid4().hex
        doc = dict(copy.deepcopy(fields), id=doc_id)
        self._docs[doc_id] = doc
        return copy.deepcopy(doc)

    async def find_by_id_and_update(self, doc_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self._docs.get(doc_id)
        if doc is None:
            return None
        updated = dict(copy.deepcopy(fields), id=doc_id)
        self._docs[doc_id] = updated
        return copy.deepcopy(updated)

    async def find_by_id_and_delete(self, doc_id: str) -> Optional[Dict[str, Any]]:
        return self._docs.pop(doc_id, None)

    async def count_documents(self, flt: Optional[Dict[str, Any]] = None) -> int:
        return sum(1 for d in self._docs.values() if _matches(d, flt or {}))

    def clear(self):
        self._docs.clear()


class Store:
    def __init__(self):
        self.categories = Collection("categories")
        self.items = Collection("items")

    def reset(self):
        self.categories.clear()
        self.items.clear()


# Process-wide store used by the web app; workflows receive it explicitly.
STORE = Store()


def get_store() -> Store:
    return STORE
