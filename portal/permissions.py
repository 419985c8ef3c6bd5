"""
Custom permission classes for role based screen access.

Every portal endpoint belongs to one or more screens of the sidebar; a
user may call it only when their role is allowed one of those screens
(see :mod:`portal.services.navigation`).
"""
from rest_framework.permissions import BasePermission

from .services.navigation import SCREEN_KEYS, can_access


class ScreenPermission(BasePermission):
    """Allow access only to users whose role may open one of ``screens``."""
    screens: tuple = ()
    message = 'Your role does not have access to this screen.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        role = getattr(user, "role", None)
        return any(can_access(role, screen) for screen in self.screens)


_cache: dict[tuple, type] = {}


def CanAccess(*screens: str) -> type:
    """Build (once) the permission class gating ``screens``."""
    if not screens:
        raise ValueError("at least one screen is required")
    for screen in screens:
        if screen not in SCREEN_KEYS:
            raise ValueError(f"unknown screen: {screen}")
    if screens not in _cache:
        name = "CanAccess_" + "_or_".join(s.replace("-", "_") for s in screens)
        _cache[screens] = type(name, (ScreenPermission,), {"screens": screens})
    return _cache[screens]
