"""
dealership_inventory.errors

Domain exception hierarchy.

Responsibilities:
- Give services a transport-agnostic way to signal business failures.
- Carry the HTTP status each failure maps to (rendered by `api.errors`).
"""

from __future__ import annotations


class DomainError(Exception):
    status_code: int = 400
    message: str = "Invalid operation"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class BusinessRuleError(DomainError):
    status_code = 400
    message = "Invalid operation"


class NotFoundError(DomainError):
    status_code = 404
    message = "Resource not found"


class PermissionDeniedError(DomainError):
    status_code = 403
    message = "Access denied"


class AuthenticationError(DomainError):
    status_code = 401
    message = "Authentication failed"
