# Middleware package init
"""
SEO Engine Backend: Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID first, so every later log line can be correlated
    2. Logging measures duration and status on the way back out
    3. CORS is FastAPI's CORSMiddleware (handles preflight)
"""
