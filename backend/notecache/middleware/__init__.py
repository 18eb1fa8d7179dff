# Middleware package init
"""
NoteCache — Middleware Package
===============================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Log method, path, status, and duration with that ID
    3. GZip: Compress large responses (GET /notes returns every note's text)
"""
