"""
Forge API - Package Initializer
=================================

A scaffolded CRUD backend: a "notes" resource plus name/password
authentication that issues short-lived signed tokens.

Layers:

    ┌─────────────────────────────────────┐
    │     Routes + Auth Guard (HTTP)      │  ← status codes, headers, token check
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← login, registration, CRUD
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "0.1.0"
