# Routes package init
"""
Restaurants API - Routes Package
=================================

Route Inventory:
    - restaurants.py:  GET/POST /restaurants, GET/PUT/DELETE /restaurants/{id}
    - health.py:       GET /health

Routes stay thin: read the request, run the validator, call the service,
choose the status code. Business logic and store access live in services.
"""
