# Middleware package init
"""
TaskNest Backend — Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID header
    2. Logging: method, path, status and duration, tagged with the request ID
    3. GZip / CORS: FastAPI's stock middleware

The only per-request state is the request ID, kept in a ContextVar.
"""
