"""
Authentication views.

``login_view`` checks a portal username/password and hands back both a
DRF token and a SimpleJWT pair, together with the user's role and the
screens that role may open.  Keeping these views apart from the
authentication class (see ``portal.authentication``) avoids circular
imports when Django REST framework initialises authentication classes.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .serializers.auth import LoginSerializer, UserSerializer
from .services.navigation import navigation_for

logger = logging.getLogger(__name__)


def _user_payload(user) -> dict:
    return {
        'ok': True,
        'role': user.role,
        'user': UserSerializer(user).data,
        'navigation': navigation_for(user.role),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """Username/password login.

    The JWT access token carries a ``role`` claim so clients can gate
    their own UI without an extra round trip.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']

    user = authenticate(request, username=username, password=s.validated_data['password'])
    if not user:
        logger.info('Failed login for %s from %s', username, request.META.get('REMOTE_ADDR'))
        return Response({'ok': False, 'error': {'code': 'invalid_credentials',
                                                'message': 'Invalid username or password'}}, status=400)

    logger.info('User %s logged in (role=%s)', user.username, user.role)
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role

    payload = _user_payload(user)
    payload.update({
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
    })
    return Response(payload, status=200)

# DRF ScopedRateThrottle uses throttle_scope on the view function
login_view.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response(_user_payload(request.user))
