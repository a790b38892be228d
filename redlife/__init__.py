"""
RedLife Backend - Application Package Initializer
=================================================

What: Marks the `redlife` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │     Routes + Access Policies        │  ← HTTP concerns, gate chains
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← stamping, ownership, lifecycles
    ├─────────────────────────────────────┤
    │   Repositories (MongoDB access)     │  ← filters, pagination, aggregation
    ├─────────────────────────────────────┤
    │  External clients (Mongo, Firebase, │  ← built in the lifespan,
    │  Stripe)                            │    injected through Depends()
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
