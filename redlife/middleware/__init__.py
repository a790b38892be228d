# Middleware package init
"""
RedLife Backend - Middleware Package
====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: abusive clients are rejected before any processing
    2. Request ID: correlation ID for logs and error envelopes
    3. Logging: one access-log line per request, tagged with the request ID
    4. GZip / CORS: FastAPI-provided

    The order is reversed for responses, so the request ID header and the
    access-log status/duration are filled in on the way out.
"""
