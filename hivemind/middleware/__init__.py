# Middleware package init
"""
Hivemind — Middleware Package
=============================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so that the access line written by the logging
    middleware carries the correlation ID.
"""
