# Middleware package init
"""
Forge API - Middleware Package
================================

Cross-cutting request handling.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - Request ID: correlation ID for logs and error bodies
    - Logging: one access line per request with status and duration

Authorization (auth.py) is not a global middleware: it is a route
dependency applied only to the routes that modify notes.
"""
