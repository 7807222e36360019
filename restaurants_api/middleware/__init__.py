"""
Restaurants API - Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route Handler

    1. Request ID: assigns the correlation ID used in every log line
    2. Logging: one access log entry per request, with status and duration
"""
