"""
Blogsite Backend — Record Schemas
==================================

What:  Pydantic models for the documents stored in MongoDB.
Why:   One model describes a record both as stored (`_id`, snake-case keys)
       and as sent over the wire (`id` as a hex string, empty fields omitted).
How:   `BlogPost` is validated from request bodies and from stored documents;
       `BlogPostUpdate` is the typed partial update for the edit endpoint.
Who:   Used by BlogService and the blog routes.

Storage layout (collection `blogposts`):
    {
        "_id": ObjectId("65a1..."),
        "title": "...", "thumbnail": "...", "category": "...",
        "date_published": "January 1 2024", "last_updated": "January 1 2024",
        "description": "...", "markdown": "# ..."
    }

`Project` and `Piece` mirror the `projects` and `pieces` collections. No route
reads or writes them yet.
"""

from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Fields a post must carry, all non-empty, to be created.
REQUIRED_FIELDS: Tuple[str, ...] = (
    "title",
    "thumbnail",
    "category",
    "date_published",
    "last_updated",
    "description",
    "markdown",
)

# Fields the edit endpoint may change. The identifier is never among them.
UPDATABLE_FIELDS: Tuple[str, ...] = REQUIRED_FIELDS

# Keys that name the identifier and are stripped from update payloads.
IDENTIFIER_KEYS: Tuple[str, ...] = ("id", "_id")


def _non_empty(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drops None and empty strings, the way the wire format omits empty fields."""
    return {key: value for key, value in values.items() if value not in (None, "")}


class BlogPost(BaseModel):
    """
    A blog article with metadata and markdown body.

    The identifier is assigned by MongoDB on insert. It is read from `_id`
    (stored documents) or `id` (JSON), and always exposed as `id`.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    date_published: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("date_published", "datePublished"),
    )
    last_updated: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("last_updated", "lastUpdated"),
    )
    description: Optional[str] = None
    markdown: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def object_id_to_hex(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v

    def missing_required_fields(self) -> List[str]:
        """Names of required fields that are absent or empty."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def to_document(self) -> Dict[str, Any]:
        """Storage form for insert: no identifier, empty fields omitted."""
        return _non_empty(self.model_dump(exclude={"id"}))

    def to_json(self) -> Dict[str, Any]:
        """Wire form for reads: empty fields omitted."""
        return _non_empty(self.model_dump())

    def to_projection(self) -> Dict[str, Any]:
        """Wire form returned by create: every field present, identifier first."""
        return {"id": self.id, **{name: getattr(self, name) for name in REQUIRED_FIELDS}}


class BlogPostUpdate(BaseModel):
    """
    Typed partial update for a blog post.

    Only whitelisted fields exist on the model, so unknown keys and identifier
    keys in the payload are dropped while validating. A field left out, set to
    null, or set to "" means "keep the stored value".
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    date_published: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("date_published", "datePublished"),
    )
    last_updated: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("last_updated", "lastUpdated"),
    )
    description: Optional[str] = None
    markdown: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "BlogPostUpdate":
        """Builds an update from a decoded JSON object, identifier keys removed."""
        fields = {key: value for key, value in payload.items() if key not in IDENTIFIER_KEYS}
        return cls.model_validate(fields)

    def to_set_document(self) -> Dict[str, Any]:
        """The `$set` body: only fields that carry a non-empty value."""
        return _non_empty(self.model_dump())


class Project(BaseModel):
    """Portfolio project, stored in the `projects` collection."""

    title: Optional[str] = None
    description: Optional[str] = None
    github_link: Optional[str] = None
    website_link: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return _non_empty(self.model_dump())


class Piece(BaseModel):
    """Media piece (video), stored in the `pieces` collection."""

    title: Optional[str] = None
    video_url: Optional[str] = None
    description: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return _non_empty(self.model_dump())
