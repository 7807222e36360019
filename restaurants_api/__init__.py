"""
Restaurants API - Application Package Initializer
==================================================

What: Marks the `restaurants_api` directory as a Python package.
Who:  Used by uvicorn (`restaurants_api.main:app`), Alembic, pytest and the
      `restaurants-api` console script.

Architecture Note:
    The service is a thin layered CRUD backend:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs, status codes
    ├─────────────────────────────────────┤
    │    Validators + Services (Logic)    │  ← required fields, id match, store calls
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← explicit Database handle
    └─────────────────────────────────────┘

    Server lifecycle (connect, listen, stop) lives in `restaurants_api.server`.
"""

__version__ = "1.0.0"
