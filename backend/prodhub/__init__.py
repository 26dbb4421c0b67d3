"""
AI Productivity Hub Backend — Application Package Initializer
==============================================================

What: Marks the `prodhub` directory as a Python package.
Why:  Enables module imports like `from prodhub.config import Settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is the server-side slice of the productivity hub that is NOT
    a CRUD view over the hosted database: scheduled jobs, admin-only reads and
    AI usage metering.

    ┌─────────────────────────────────────┐
    │   Routes (cron, admin, health)      │  ← HTTP concerns + auth gate
    ├─────────────────────────────────────┤
    │   Services (jobs, usage, feedback)  │  ← Business logic, no HTTP
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← ORM mappings + Pydantic envelopes
    ├─────────────────────────────────────┤
    │   Database (hosted PostgreSQL)      │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Configuration is a single Settings object built at process start and
    injected everywhere it is needed (see config.py and main.create_app).
"""

__version__ = "1.0.0"
