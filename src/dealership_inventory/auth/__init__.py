"""
dealership_inventory.auth

Authentication/authorization package.

Responsibilities:
- Password hashing and JWT helpers.
- FastAPI auth dependencies (Principal + RBAC).
"""

# Package marker.
