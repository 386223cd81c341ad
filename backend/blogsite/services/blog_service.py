"""
Blogsite Backend — Blog Service (Business Logic)
=================================================

What:  The blog post operations: create, list, get, update, delete-all, search.
Why:   Keeps the rules (required fields, update whitelist, last-updated refresh,
       search filter) out of the HTTP layer so they can be tested without it.
How:   Builds MongoDB filter/update documents and runs them against the
       `blogposts` collection, each under a `pymongo.timeout` deadline.
Who:   Constructed per request by `get_blog_service`; called by blog routes.

Error Handling Strategy:
    Driver exceptions (PyMongoError, including deadline expiry) are wrapped in
    StorageError carrying the driver's message. Stored documents that do not
    validate as BlogPost raise RecordDecodeError. Argument problems raise
    InvalidArgumentError / ValidationError before the store is touched.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Tuple

import pymongo
from bson import ObjectId
from fastapi import Depends
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from blogsite.config import settings
from blogsite.database import Database, get_database
from blogsite.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    RecordDecodeError,
    StorageError,
    ValidationError,
)
from blogsite.schemas.records import BlogPost, BlogPostUpdate

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("title", "description", "category")


def format_post_date(moment: datetime) -> str:
    """Site date format: full month name, unpadded day, 4-digit year ("March 5 2025")."""
    return f"{moment:%B} {moment.day} {moment:%Y}"


def parse_object_id(value: str) -> ObjectId:
    """
    Converts a 24-char hex string to an ObjectId.

    Raises:
        InvalidArgumentError: The value is not a well-formed identifier.
    """
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidArgumentError(
            "the provided hex string is not a valid ObjectID",
            context={"id": value},
        )
    return ObjectId(value)


def build_search_filter(query: str) -> Dict[str, Any]:
    """
    Case-insensitive substring match over title, description and category.

    The query is escaped, so ".", "*" and friends match themselves.
    """
    pattern = re.escape(query)
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS]}


class BlogService:
    """
    Blog post operations over one collection.

    Args:
        collection: The `blogposts` collection handle
        timeout: Deadline in seconds applied to every database call
    """

    def __init__(self, collection, timeout: float = 10.0):
        self.collection = collection
        self.timeout = timeout

    async def create(self, post: BlogPost) -> Tuple[str, Dict[str, Any]]:
        """
        Insert a new post.

        Returns:
            (inserted_id, document): hex identifier and the stored post as JSON

        Raises:
            ValidationError: A required field is empty (nothing is inserted)
            StorageError: The insert failed
        """
        missing = post.missing_required_fields()
        if missing:
            raise ValidationError(
                "missing required blog fields",
                context={"missing_fields": missing},
            )

        try:
            with pymongo.timeout(self.timeout):
                result = await self.collection.insert_one(post.to_document())
        except PyMongoError as e:
            logger.error("Insert into blogposts failed: %s", str(e))
            raise StorageError(str(e), context={"operation": "insert_one"}) from e

        inserted_id = str(result.inserted_id)
        stored = post.model_copy(update={"id": inserted_id})
        logger.info("Blog post created: %s", inserted_id)
        return inserted_id, stored.to_projection()

    async def list_all(self) -> List[BlogPost]:
        """Every post in store-native order (no sort is applied)."""
        return await self._find({}, operation="find")

    async def get_by_id(self, post_id: str) -> BlogPost:
        """
        Fetch exactly one post.

        Raises:
            InvalidArgumentError: Malformed identifier
            NotFoundError: No post has this identifier
            StorageError: Query or decode failure
        """
        oid = parse_object_id(post_id)
        try:
            with pymongo.timeout(self.timeout):
                document = await self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            raise StorageError(str(e), context={"operation": "find_one", "id": post_id}) from e

        if document is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return self._decode(document)

    async def update_by_id(self, post_id: str, fields: BlogPostUpdate) -> int:
        """
        Apply a partial update to one post.

        Only whitelisted, non-empty fields are written. When `markdown` is
        among them, `last_updated` is set to today in the same `$set`.

        Returns:
            modified_count (0 or 1)

        Raises:
            InvalidArgumentError: Malformed identifier (checked first)
            ValidationError: No usable field left after filtering
            StorageError: The update failed
        """
        oid = parse_object_id(post_id)

        updates = fields.to_set_document()
        if not updates:
            raise ValidationError("no valid fields provided to update; provide at least one")

        if "markdown" in updates:
            updates["last_updated"] = format_post_date(datetime.now())

        try:
            with pymongo.timeout(self.timeout):
                result = await self.collection.update_one({"_id": oid}, {"$set": updates})
        except PyMongoError as e:
            logger.error("Update of blog post %s failed: %s", post_id, str(e))
            raise StorageError(str(e), context={"operation": "update_one", "id": post_id}) from e

        logger.info(
            "Blog post %s updated: fields=%s modified=%d",
            post_id,
            sorted(updates),
            result.modified_count,
        )
        return result.modified_count

    async def delete_all(self) -> int:
        """Remove every post. Irreversible; returns how many were deleted."""
        try:
            with pymongo.timeout(self.timeout):
                result = await self.collection.delete_many({})
        except PyMongoError as e:
            logger.error("Delete of all blog posts failed: %s", str(e))
            raise StorageError(str(e), context={"operation": "delete_many"}) from e

        logger.warning("Deleted all blog posts: %d removed", result.deleted_count)
        return result.deleted_count

    async def search(self, query: str) -> List[BlogPost]:
        """
        Posts whose title, description or category contain `query`, ignoring case.

        Raises:
            InvalidArgumentError: Empty query
        """
        if not query:
            raise InvalidArgumentError("search query must not be empty")
        return await self._find(build_search_filter(query), operation="search")

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _find(self, query: Dict[str, Any], operation: str) -> List[BlogPost]:
        try:
            with pymongo.timeout(self.timeout):
                documents = await self.collection.find(query).to_list()
        except PyMongoError as e:
            logger.error("Query on blogposts failed (%s): %s", operation, str(e))
            raise StorageError(str(e), context={"operation": operation}) from e
        return [self._decode(document) for document in documents]

    @staticmethod
    def _decode(document: Dict[str, Any]) -> BlogPost:
        try:
            return BlogPost.model_validate(document)
        except PydanticValidationError as e:
            raise RecordDecodeError(
                str(e),
                context={"id": str(document.get("_id", ""))},
            ) from e


# ── Dependency ────────────────────────────────────────────────────────────
def get_blog_service(database: Database = Depends(get_database)) -> BlogService:
    """FastAPI dependency: a BlogService bound to `blogposts` with the request deadline."""
    return BlogService(database.blog_posts, timeout=settings.request_timeout)
