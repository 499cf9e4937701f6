# Services package init
"""
Forge API - Services Layer
============================

Service Inventory:
    - PasswordHasher: bcrypt hashing and verification
    - TokenCodec:     signed, expiring access tokens (JWT, HS256)
    - UserStore:      credential store lookups and inserts
    - AuthService:    login and registration
    - NoteService:    CRUD for notes

Services take the request's database session as an argument and hold no
per-request state; the hasher and codec are built once by the app factory.
"""
