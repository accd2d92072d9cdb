"""
RectSizer Backend: Application Package Initializer
==================================================

What: Marks the `app` directory as a Python package.
Who:  Used by uvicorn (`app.main:app`), pytest, and the `rectsizer` entry point.

Architecture Note:
    The backend keeps the usual layered split:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   RectangleService (orchestration)  │  ← delay → validate → persist
    ├─────────────────────────────────────┤
    │   Validator  │  RectangleStore      │  ← pure rule │ shared state + record
    ├─────────────────────────────────────┤
    │        Schemas (wire contract)      │  ← Pydantic models
    └─────────────────────────────────────┘

    Each layer is constructed explicitly and injected, so tests build an
    isolated store and app per test case.
"""

__version__ = "1.0.0"
