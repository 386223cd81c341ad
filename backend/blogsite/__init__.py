"""
Blogsite Backend — Application Package Initializer
===================================================

What: Marks the `blogsite` directory as a Python package.
Why:  Enables module imports like `from blogsite.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    This backend follows a small layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs, status codes, wire bodies
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Required fields, whitelist, filters
    ├─────────────────────────────────────┤
    │          Schemas (Records)          │  ← Pydantic shapes for posts/projects/pieces
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← MongoDB client + collection handles
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
