"""
Parking API — Middleware Package
=================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Security Headers] → [CORS] → Router

    1. Request ID first: every later log line can carry the correlation ID
    2. Logging: measures the full duration including the rest of the chain
    3. Security headers: stamped on every response, errors included
    4. CORS: Starlette's CORSMiddleware (handles preflight)

Authentication and validation are NOT middleware: they are per-route
FastAPI dependencies (see parking_api/auth.py and parking_api/validation.py),
so public routes such as /health and /api/auth/login skip them naturally.
"""
