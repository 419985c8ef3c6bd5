"""Staff role views (upstream ``/roles``)."""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import RoleSerializer
from ..upstream import roles

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('roles')])
def role_list(request):
    if request.method == 'GET':
        return Response(roles.list_roles())
    s = RoleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('createdBy') is None and request.user.upstream_user_id:
        data['createdBy'] = request.user.upstream_user_id
    role = roles.create_role(data)
    logger.info('Role %s created by %s', role['name'], request.user.username)
    return Response(role, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('roles')])
def role_detail(request, role_id: str):
    if request.method == 'GET':
        return Response(roles.get_role(role_id))
    if request.method == 'PUT':
        s = RoleSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(roles.update_role(role_id, s.validated_data))
    roles.delete_role(role_id)
    logger.info('Role %s deleted by %s', role_id, request.user.username)
    return Response({'ok': True})
