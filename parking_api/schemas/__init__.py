"""
Parking API — Pydantic Schemas
===============================

API contracts, kept separate from the SQLAlchemy models so the wire format
can evolve independently of the table layout.

    common.py   error bodies, health, shared UTC datetime type
    auth.py     register/login/token/identity
    car.py      car create/response
    parking.py  parking lots and sessions
    report.py   report query contracts and report bodies
"""
