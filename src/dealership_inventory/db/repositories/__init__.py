"""
dealership_inventory.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the persistence layer.
- Share small query helpers between repositories.
"""

from __future__ import annotations

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Lowercased `%term%` pattern with LIKE wildcards escaped; pair with `escape=LIKE_ESCAPE`."""
    escaped = (
        term.lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; business rules belong in routers/services.
