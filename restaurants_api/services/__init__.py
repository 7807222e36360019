# Services package init
"""
Restaurants API - Services Layer
=================================

What:  Store access sitting between routes (HTTP) and the database.

Service Inventory:
    - RestaurantService: list/get/create/update/delete, plus the
      `to_representation` mapper from stored entity to API shape
"""
