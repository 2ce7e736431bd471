# Services package init
"""
Catalog Backend: Services Layer
================================

What:  Business logic layer sitting between routes (HTTP) and repositories (persistence).
How:   Services take a raw payload, validate it, hand entities to a
       repository, and return transfer objects.

Service Inventory:
    - CategoryService: category CRUD plus the category → products listing
    - ProductService:  product CRUD with partial updates

Services hold no state; the session is passed into every call.
"""
