"""
Acme Ice Cream API: Middleware Package
=======================================

Middleware Chain:
    Request → [Access Log] → [Request ID + 500 fallback] → Route Handler

    The access log is outermost so it also records the generic 500s the
    request-ID middleware produces for unhandled exceptions.
"""
