"""
Blogsite Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mocked collection, API client, pages dir).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.
When:  Fixtures are created fresh for each test.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_collection: Mock `blogposts` collection (no real MongoDB needed)
    ├── fake_database: Gateway stand-in exposing mock_collection
    ├── frontend_dir: Temporary STATIC_DIR with the site's pages
    ├── sample_post_data: A complete blog post as the frontend sends it
    ├── stored_post: The same post as MongoDB returns it
    └── test_client: HTTPX AsyncClient bound to a fresh app
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
os.environ["MONGO_URI"] = "mongodb://localhost:27017/?connectTimeoutMS=100"
os.environ["MONGO_DATABASE"] = "blogsite_test"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

POST_ID = "65a1b2c3d4e5f60718293a4b"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_collection():
    """
    Provides a mock `blogposts` collection.

    What:    A MagicMock with the async methods BlogService calls.
    Why:     Tests should not require a real MongoDB server.
    How:     insert_one/find_one/update_one/delete_many are AsyncMocks;
             find() is synchronous and returns a cursor whose to_list() is awaited.

    Usage:
        async def test_list(mock_collection):
            mock_collection.find.return_value.to_list.return_value = [doc]
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.update_one = AsyncMock()
    collection.delete_many = AsyncMock()
    collection.find.return_value.to_list = AsyncMock(return_value=[])
    return collection


@pytest.fixture
def fake_database(mock_collection):
    """Gateway stand-in: `blog_posts` is the mock collection, ping succeeds."""
    database = MagicMock()
    database.blog_posts = mock_collection
    database.ping = AsyncMock(return_value=True)
    database.disconnect = AsyncMock()
    return database


@pytest.fixture
def frontend_dir(tmp_path, monkeypatch):
    """
    Provides a temporary frontend directory and points STATIC_DIR at it.

    Layout:
        index.html, projects.html, pieces.html, blog.html, 404.html,
        css/site.css, js/app.js, img/logo.png
    """
    from blogsite.config import settings

    root = tmp_path / "static"
    root.mkdir()
    for name in ("index", "projects", "pieces", "blog"):
        (root / f"{name}.html").write_text(f"<h1>{name}</h1>")
    (root / "404.html").write_text("<h1>not here</h1>")
    (root / "css").mkdir()
    (root / "css" / "site.css").write_text("body { margin: 0; }")
    (root / "js").mkdir()
    (root / "js" / "app.js").write_text("console.log('hi');")
    (root / "img").mkdir()
    (root / "img" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")

    monkeypatch.setattr(settings, "static_dir", str(root))
    return root


@pytest.fixture
def sample_post_data():
    """
    A complete blog post as the admin page posts it.

    Why:     Consistent test data across multiple test files.
    """
    return {
        "title": "Hello World",
        "thumbnail": "https://example.com/thumb.png",
        "category": "Go",
        "date_published": "January 1 2024",
        "last_updated": "January 1 2024",
        "description": "First post",
        "markdown": "# Hello",
    }


@pytest.fixture
def stored_post(sample_post_data):
    """The sample post as MongoDB returns it: `_id` is an ObjectId."""
    return {"_id": ObjectId(POST_ID), **sample_post_data}


@pytest_asyncio.fixture
async def test_client(fake_database):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to a fresh FastAPI app.
    Why:     Enables testing of HTTP endpoints without running a server or MongoDB.
    How:     ASGITransport does not run the lifespan, so the fake gateway is
             placed on app.state directly.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from blogsite.main import create_app

    app = create_app()
    app.state.database = fake_database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
