# Middleware package init
"""
Employees API — Middleware Package
===================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    - Request ID first, so every access log line carries the correlation id
    - The order is reversed for responses; the logger sees the final status
"""
