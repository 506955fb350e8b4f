"""
dealership_inventory.api

API package for the dealership inventory service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, error rendering and response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to repos/services.
