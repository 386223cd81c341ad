# Middleware package init
"""
Blogsite Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first so every log line of the request shares one ID
    - Logging measures the full duration; it skips /health and OPTIONS preflights
    - CORS innermost so its headers land on every routed response, and
      preflight OPTIONS requests are answered before routing
"""
