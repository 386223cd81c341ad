"""
Blogsite Backend — Database Gateway
====================================

What:  MongoDB client, the three collection handles, and the FastAPI dependency
       that hands them to route handlers.
Why:   Centralizes all database connection logic in one place.
How:   `Database.connect()` opens an AsyncMongoClient, pings the server under a
       deadline and exposes `blog_posts`, `projects` and `pieces`. The instance is
       created once in the application lifespan and stored on `app.state`.
Who:   Built by main.lifespan; injected into routes via `get_database`.
When:  Connected once at startup, disconnected once at shutdown.

Handles are assigned in __init__ and exposed read-only, so concurrent requests
share them without locking. There is no retry: a failed connect aborts startup.
"""

import asyncio
import logging

import pymongo
from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from blogsite.exceptions import DatabaseConnectionError, StorageError

logger = logging.getLogger(__name__)

BLOG_POSTS_COLLECTION = "blogposts"
PROJECTS_COLLECTION = "projects"
PIECES_COLLECTION = "pieces"


class Database:
    """
    Process-wide MongoDB handles.

    Attributes:
        client:      The AsyncMongoClient (owns the connection pool)
        blog_posts:  Collection `blogposts`
        projects:    Collection `projects`
        pieces:      Collection `pieces`
    """

    def __init__(self, client: AsyncMongoClient, database_name: str):
        self._client = client
        db = client[database_name]
        self._blog_posts = db[BLOG_POSTS_COLLECTION]
        self._projects = db[PROJECTS_COLLECTION]
        self._pieces = db[PIECES_COLLECTION]

    @property
    def client(self) -> AsyncMongoClient:
        return self._client

    @property
    def blog_posts(self) -> AsyncCollection:
        return self._blog_posts

    @property
    def projects(self) -> AsyncCollection:
        return self._projects

    @property
    def pieces(self) -> AsyncCollection:
        return self._pieces

    @classmethod
    async def connect(cls, uri: str, database_name: str, timeout: float = 20.0) -> "Database":
        """
        Connect to MongoDB and verify the server answers.

        Args:
            uri: MongoDB connection string
            database_name: Database holding the site collections
            timeout: Deadline in seconds for server selection and the ping

        Raises:
            DatabaseConnectionError: Empty URI, invalid URI, unreachable server,
                or failed ping. The client is closed before raising.
        """
        if not uri:
            raise DatabaseConnectionError("empty mongo uri")

        try:
            client: AsyncMongoClient = AsyncMongoClient(
                uri, serverSelectionTimeoutMS=int(timeout * 1000)
            )
        except PyMongoError as e:
            raise DatabaseConnectionError(str(e), context={"stage": "configure"}) from e

        try:
            with pymongo.timeout(timeout):
                await client.admin.command("ping")
        except PyMongoError as e:
            await client.close()
            raise DatabaseConnectionError(str(e), context={"stage": "ping"}) from e

        logger.info("Connected to MongoDB database '%s'", database_name)
        return cls(client, database_name)

    async def ping(self, timeout: float = 5.0) -> bool:
        """Liveness probe for the health check. Never raises."""
        try:
            with pymongo.timeout(timeout):
                await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False
        return True

    async def disconnect(self, timeout: float = 10.0) -> None:
        """
        Close the client and its pool within `timeout` seconds.

        Errors are logged only; shutdown continues regardless.
        """
        try:
            await asyncio.wait_for(self._client.close(), timeout=timeout)
        except (PyMongoError, asyncio.TimeoutError) as e:
            logger.error("error disconnecting mongo client: %s", str(e) or type(e).__name__)
            return
        logger.info("Disconnected from MongoDB")


# ── Dependency ────────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the gateway created in the lifespan.

    Tests set `app.state.database` to a fake gateway instead.
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise StorageError("database is not connected")
    return database
