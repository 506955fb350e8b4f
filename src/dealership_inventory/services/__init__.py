"""
dealership_inventory.services

Service-layer package.

Responsibilities:
- Own transaction boundaries for multi-entity operations.
- Hold business rules that should not live in HTTP handlers.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `dealership_inventory.errors.DomainError` subclasses; the API layer
# renders them (see `api.errors`).
