"""
RedLife Backend - MongoDB Repository Base
=========================================

What:  Thin async data-access facade over one MongoDB collection.
How:   Wraps pymongo's AsyncCollection with the handful of operations the
       services need, normalizes `_id` to a string on the way out, and
       translates driver errors into application exceptions.
Who:   Subclassed once per collection (users, donations, funds, blogs).

Query conventions:
    filter  equality-only dict; None means "match everything"
    sort    list of (field, direction) pairs; None keeps natural order
    skip    0 means no skip
    limit   0 means no limit
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from redlife.exceptions import ConflictError, DatabaseError, ValidationError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]


@dataclass(frozen=True)
class UpdateOutcome:
    matched_count: int
    modified_count: int


def parse_object_id(value: str) -> ObjectId:
    """
    Convert a path parameter into an ObjectId.

    Raises:
        ValidationError: value is not a 24-character hex ObjectId
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(message=f"'{value}' is not a valid id", field="id")


def serialize_document(doc: Document) -> Document:
    """Copy of a stored document with `_id` rendered as a string."""
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    return out


def build_filter(**conditions: Optional[str]) -> Document:
    """
    Equality filter from optional query parameters.

    Absent and empty values impose no constraint:
        build_filter(status="active", role=None, district="") → {"status": "active"}
    """
    return {key: value for key, value in conditions.items() if value not in (None, "")}


def sort_by(field: str, direction: Optional[str]) -> Optional[List[Tuple[str, int]]]:
    """`asc`/`desc` → single-field sort spec; anything else keeps natural order."""
    if direction == "asc":
        return [(field, ASCENDING)]
    if direction == "desc":
        return [(field, DESCENDING)]
    return None


class MongoRepository:
    """Common operations for a single collection."""

    collection_name: str = ""

    def __init__(self, db: AsyncDatabase):
        self.collection: AsyncCollection = db[self.collection_name]

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except DuplicateKeyError as e:
            logger.warning(
                "Duplicate key on %s.%s: %s", self.collection_name, operation, e.details
            )
            raise ConflictError(
                context={"collection": self.collection_name, "key": (e.details or {}).get("keyValue")}
            )
        except PyMongoError as e:
            logger.error(
                "MongoDB %s on '%s' failed: %s", operation, self.collection_name, str(e)
            )
            raise DatabaseError(
                context={
                    "collection": self.collection_name,
                    "operation": operation,
                    "error_type": type(e).__name__,
                }
            )

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find(
        self,
        filter: Optional[Document] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Document]:
        with self._translate_errors("find"):
            cursor = self.collection.find(filter or {})
            if sort:
                cursor = cursor.sort(list(sort))
            if skip > 0:
                cursor = cursor.skip(skip)
            if limit > 0:
                cursor = cursor.limit(limit)
            docs = await cursor.to_list(length=None)
        return [serialize_document(doc) for doc in docs]

    async def find_one(self, filter: Document) -> Optional[Document]:
        with self._translate_errors("find_one"):
            doc = await self.collection.find_one(filter)
        return serialize_document(doc) if doc is not None else None

    async def find_by_id(self, id: str) -> Optional[Document]:
        return await self.find_one({"_id": parse_object_id(id)})

    async def count(self, filter: Optional[Document] = None) -> int:
        with self._translate_errors("count_documents"):
            return await self.collection.count_documents(filter or {})

    async def estimated_count(self) -> int:
        """Metadata-based count of the whole collection; fast but not exact."""
        with self._translate_errors("estimated_document_count"):
            return await self.collection.estimated_document_count()

    async def sum_field(self, field: str) -> float:
        """
        Sum a numeric-ish field across all documents.

        Values may be stored as numbers or numeric strings; `$toDouble`
        coerces both. An empty collection sums to 0.
        """
        pipeline = [
            {"$group": {"_id": None, "total": {"$sum": {"$toDouble": f"${field}"}}}},
        ]
        with self._translate_errors("aggregate"):
            cursor = await self.collection.aggregate(pipeline)
            results = await cursor.to_list(length=1)
        if not results:
            return 0
        return results[0].get("total") or 0

    # ── Writes ────────────────────────────────────────────────────────────

    async def insert(self, document: Document) -> str:
        with self._translate_errors("insert_one"):
            result = await self.collection.insert_one(document)
        return str(result.inserted_id)

    async def update_one(self, filter: Document, fields: Document) -> UpdateOutcome:
        """Partial `$set` of the given fields on the first matching document."""
        with self._translate_errors("update_one"):
            result = await self.collection.update_one(filter, {"$set": fields})
        return UpdateOutcome(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )

    async def update_by_id(self, id: str, fields: Document) -> UpdateOutcome:
        return await self.update_one({"_id": parse_object_id(id)}, fields)

    async def delete_by_id(self, id: str) -> int:
        """Hard delete; returns the number of documents removed (0 or 1)."""
        oid = parse_object_id(id)
        with self._translate_errors("delete_one"):
            result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count
