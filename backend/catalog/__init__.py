"""
Catalog Backend: Application Package Initializer
=================================================

What: Marks the `catalog` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (validate → persist → map)│
    ├─────────────────────────────────────┤
    │  Validation & Mapping (pure, sync)  │  ← field rules, entity ⇄ DTO
    ├─────────────────────────────────────┤
    │    Repositories (storage access)    │  ← find/list/create/update/delete
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Validation and mapping never touch the database; repositories never
    see raw request payloads.
"""

__version__ = "1.0.0"
