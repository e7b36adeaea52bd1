"""Auth package: identity resolution dependencies."""

from jenifer_api.auth.dependencies import get_current_user

__all__ = [
    "get_current_user",
]
