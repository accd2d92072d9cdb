# Middleware package init
"""
RectSizer Backend: Middleware Package
=====================================

Middleware Chain:
    Request → [RequestContext] → [CORS] → Route Handler

    - RequestContext: request ID, per-request timings, access line
    - CORS innermost; it answers browser preflight OPTIONS requests
"""
