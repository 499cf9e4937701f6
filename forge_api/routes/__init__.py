# Routes package init
"""
Forge API - API Routes Package
================================

Route Inventory:
    - auth.py:    POST /login, POST /register
    - notes.py:   POST/GET /notes, GET/PUT/DELETE /notes/{id}
    - health.py:  GET /health

Routes stay thin: they read the request, call a service and shape the
response. Errors raised by services are turned into responses by the
handlers registered in main.py.
"""
