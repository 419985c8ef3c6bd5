"""
Token authentication for portal users.

Staff sign in through ``/api/auth/login`` and receive both a DRF token and
a SimpleJWT pair.  ``REST_FRAMEWORK['DEFAULT_AUTHENTICATION_CLASSES']``
lists this class next to SimpleJWT's ``JWTAuthentication`` so either
``Authorization: Token <key>`` or ``Authorization: Bearer <jwt>`` works.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """``Authorization: Token <key>`` for tokens issued at login.

    Inactive users are rejected by the base class, so deactivating a
    portal account in the admin revokes its token as well.
    """

    keyword = 'Token'
