"""
Blogsite Backend — Blog Route Handlers
=======================================

What:  The /api endpoints over blog posts: list, create, delete-all, edit, get, search.
Why:   Maps HTTP verbs, query strings and JSON bodies onto BlogService calls.
How:   Decodes and checks the request, calls the service, returns JSON on
       success. Failures are raised as BlogsiteError subclasses whose message
       is the exact response body; the global handler writes it as text.

Route Inventory:
    GET  /api/blogposts              list every post
    POST /api/blogposts/post         create a post (201)
    POST /api/deleteall              delete every post
    POST /api/blogposts/edit         partial update {id, ...fields}
    GET  /api/blogposts/get?id=      one post
    GET  /api/blogposts/search?q=    substring search

Error bodies:
    list/create/delete-all answer a plain sentence ("invalid JSON: ...");
    edit/get/search answer a JSON literal ({"error":"invalid id"}). Existing
    clients rely on both forms, so they are kept as they are.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError as PydanticValidationError

from blogsite.exceptions import (
    BlogsiteError,
    InvalidArgumentError,
    NotFoundError,
    RecordDecodeError,
    StorageError,
    ValidationError,
)
from blogsite.schemas.records import BlogPost, BlogPostUpdate
from blogsite.schemas.responses import CreateResponse, DeleteAllResponse, EditResponse
from blogsite.services.blog_service import BlogService, get_blog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Blog"])


def error_body(message: str) -> str:
    """JSON literal error body: {"error":"<message>"}."""
    return json.dumps({"error": message}, separators=(",", ":"))


def describe_validation_error(exc: PydanticValidationError) -> str:
    """First pydantic error as "<field>: <reason>" (or just the reason)."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


# Body written for a wrong HTTP verb, per route.
METHOD_NOT_ALLOWED_BODIES: Dict[str, str] = {
    "/api/blogposts": "Method not allowed",
    "/api/blogposts/post": "method not allowed (only POST)",
    "/api/deleteall": "method not allowed (only POST)",
    "/api/blogposts/edit": error_body("method not allowed (only POST)"),
    "/api/blogposts/get": error_body("method not allowed (only GET)"),
    "/api/blogposts/search": error_body("method not allowed (only GET)"),
}


@router.get(
    "/blogposts",
    summary="List every blog post",
    description="Returns all posts in store order. No pagination, no sorting.",
)
async def list_blog_posts(
    service: BlogService = Depends(get_blog_service),
) -> List[Dict[str, Any]]:
    try:
        posts = await service.list_all()
    except RecordDecodeError as e:
        raise StorageError(f"Error decoding blog posts: {e.message}", context=e.context) from e
    except StorageError as e:
        raise StorageError(f"Error fetching blog posts: {e.message}", context=e.context) from e

    return [post.to_json() for post in posts]


@router.post(
    "/blogposts/post",
    status_code=201,
    response_model=CreateResponse,
    summary="Create a blog post",
    description=(
        "Body: JSON post with title, thumbnail, category, date_published, "
        "last_updated, description and markdown, all non-empty."
    ),
)
async def create_blog_post(
    request: Request,
    service: BlogService = Depends(get_blog_service),
) -> CreateResponse:
    """
    Create a post and return its identifier with the stored document.

    A body that is not a JSON object of strings → 400 "invalid JSON: ...".
    A missing field or a failed insert → 500 "failed to insert blog post: ...".
    """
    body = await request.body()
    try:
        post = BlogPost.model_validate_json(body)
    except PydanticValidationError as e:
        raise ValidationError(f"invalid JSON: {describe_validation_error(e)}") from e

    try:
        inserted_id, document = await service.create(post)
    except (ValidationError, StorageError) as e:
        raise BlogsiteError(
            f"failed to insert blog post: {e.message}",
            context=e.context,
            status_code=500,
        ) from e

    return CreateResponse(inserted_id=inserted_id, document=document)


@router.post(
    "/deleteall",
    response_model=DeleteAllResponse,
    summary="Delete every blog post",
    description="Irreversible. There is no confirmation step.",
)
async def delete_all_blog_posts(
    service: BlogService = Depends(get_blog_service),
) -> DeleteAllResponse:
    try:
        deleted = await service.delete_all()
    except StorageError as e:
        raise StorageError(f"failed to delete blogposts: {e.message}", context=e.context) from e

    return DeleteAllResponse(deleted_count=deleted)


@router.post(
    "/blogposts/edit",
    response_model=EditResponse,
    summary="Partially update a blog post",
    description=(
        "Body: {\"id\": \"<hex>\", ...fields}. Only title, thumbnail, category, "
        "date_published, last_updated, description and markdown are applied; "
        "other keys are ignored and empty strings leave the field unchanged."
    ),
)
async def edit_blog_post(
    request: Request,
    service: BlogService = Depends(get_blog_service),
) -> EditResponse:
    """
    Update the whitelisted fields of one post.

    Checks run in order: JSON object → `id` present → `id` a non-empty string
    → field types → well-formed id → at least one usable field.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise InvalidArgumentError(error_body("invalid JSON")) from e
    if not isinstance(payload, dict):
        raise InvalidArgumentError(error_body("invalid JSON"))

    if "id" not in payload:
        raise InvalidArgumentError(error_body("id is required"))
    post_id = payload["id"]
    if not isinstance(post_id, str) or not post_id:
        raise InvalidArgumentError(error_body("id must be a hex string"))

    try:
        fields = BlogPostUpdate.from_payload(payload)
    except PydanticValidationError as e:
        field = str(e.errors()[0].get("loc", ("field",))[0])
        raise ValidationError(error_body(f"{field} must be a string"), field=field) from e

    try:
        modified = await service.update_by_id(post_id, fields)
    except InvalidArgumentError as e:
        raise InvalidArgumentError(error_body(f"invalid id: {e.message}"), context=e.context) from e
    except ValidationError as e:
        raise ValidationError(error_body(e.message)) from e
    except StorageError as e:
        raise StorageError(error_body(e.message), context=e.context) from e

    return EditResponse(modified_count=modified)


@router.get(
    "/blogposts/get",
    summary="Get one blog post",
    description="Query parameter `id`: the post's 24-character hex identifier.",
)
async def get_blog_post(
    post_id: Optional[str] = Query(default=None, alias="id"),
    service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    if not post_id:
        raise InvalidArgumentError(error_body("id query param required"))

    try:
        post = await service.get_by_id(post_id)
    except InvalidArgumentError as e:
        raise InvalidArgumentError(error_body("invalid id"), context=e.context) from e
    except NotFoundError as e:
        raise NotFoundError(resource="post", resource_id=post_id, message=error_body("post not found")) from e
    except StorageError as e:
        raise StorageError(error_body(e.message), context=e.context) from e

    return post.to_json()


@router.get(
    "/blogposts/search",
    summary="Search blog posts",
    description=(
        "Query parameter `q`: text matched case-insensitively as a substring of "
        "title, description or category."
    ),
)
async def search_blog_posts(
    q: Optional[str] = Query(default=None),
    service: BlogService = Depends(get_blog_service),
) -> List[Dict[str, Any]]:
    if not q:
        raise InvalidArgumentError(error_body("q query param required"))

    try:
        posts = await service.search(q)
    except RecordDecodeError as e:
        raise StorageError(error_body(f"decode failed: {e.message}"), context=e.context) from e
    except StorageError as e:
        raise StorageError(error_body(f"search failed: {e.message}"), context=e.context) from e

    return [post.to_json() for post in posts]
