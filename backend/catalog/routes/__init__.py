# Routes package init
"""
Catalog Backend: API Routes Package
====================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - categories.py: /api/categories, /api/categories/{id}, /api/categories/{id}/products
    - products.py:   /api/products, /api/products/{id}
    - health.py:     GET /health

Design Principle:
    Routes are THIN. They extract path/query/body data, call a service,
    and set status codes and headers. Validation, persistence and mapping
    live in the layers below.
"""
