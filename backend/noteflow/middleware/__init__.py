# Middleware package init
"""
NoteFlow Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit FIRST: Reject abusive clients before any provider tokens are spent
    2. Request ID: Generate correlation ID for logging and tracing
    3. Logging: Log request details with the generated request ID
"""
