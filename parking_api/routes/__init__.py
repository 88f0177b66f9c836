"""
Parking API — Routes Package
=============================

Route Inventory:
    - auth.py:              POST /api/auth/register, POST /api/auth/login, GET /api/auth/me
    - cars.py:              POST/GET /api/cars, GET /api/cars/{id}
    - parking_lots.py:      POST/GET /api/parking-lots, GET /api/parking-lots/{id}
    - parking_sessions.py:  POST /api/parking-sessions/entry, POST /api/parking-sessions/{id}/exit,
                            GET /api/parking-sessions, GET /api/parking-sessions/{id}
    - reports.py:           GET /api/reports/{outgoing,incoming,occupancy,revenue}
    - health.py:            GET /health

Routes stay thin: resolve dependencies (auth chain, validated input, db
session), call one service method, return its response model.
"""
