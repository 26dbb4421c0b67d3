# Middleware package init
"""
AI Productivity Hub Backend — Middleware Package
=================================================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler (auth gate runs as a dependency)

    Request ID runs first so the access log line and every handler log line
    carry the same correlation ID.
"""
