"""
TaskNest Backend — Application Package Initializer
===================================================

What: Marks the `tasknest` directory as a Python package.
Who:  Imported by uvicorn (`tasknest.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into the same layers for every resource:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, cloning, auth checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services never reach for a global database client; each call receives
    the request's AsyncSession explicitly.
"""

__version__ = "1.0.0"
