"""
dealership_inventory.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, seeding and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only many-to-one relationships are mapped; aggregates over collections are
# computed by repository queries so async sessions never lazy-load.
