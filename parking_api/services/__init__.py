"""
Parking API — Services Layer
=============================

What:  Business logic between routes (HTTP) and database (persistence).
How:   Services receive an AsyncSession per call, apply the rules, and return
       response schemas. They hold no per-request state, so each is a
       module-level singleton.

Service Inventory:
    - AuthService:    registration, login/token issue, admin bootstrap
    - CarService:     car registration and lookup
    - ParkingService: parking lots, car entry, car exit and fee computation
    - ReportService:  incoming/outgoing, occupancy and revenue reports
"""
