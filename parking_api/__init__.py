"""
Parking API — Application Package Initializer
==============================================

What: Marks the `parking_api` directory as a Python package.
Why:  Enables module imports like `from parking_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is a layered request pipeline:

    ┌─────────────────────────────────────┐
    │   Routes (API Layer) + Dependencies │  ← HTTP, auth chain, validation
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Entry/exit rules, reports
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    A request flows: middleware → router → authenticate → authorize →
    validate → route handler → service → database → JSON response.
"""

__version__ = "1.0.0"
