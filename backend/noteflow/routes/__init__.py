# Routes package init
"""
NoteFlow Backend — API Routes Package
=======================================

Route Inventory:
    - ai.py:      POST /ai/summarize | /ai/generate | /ai/improve | /ai/answer | /ai/tags
    - notes.py:   GET/POST /notes, GET/PUT/DELETE /notes/{id}
    - auth.py:    POST /auth/signin
    - health.py:  GET  /health

Design Principle:
    Routes are THIN: check required fields, call a service, shape the
    response. Prompts, provider calls and SQL live in services.
"""
