"""Staff account views (upstream ``/users``)."""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import StaffSerializer
from ..upstream import staff

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('staff')])
def staff_list(request):
    if request.method == 'GET':
        return Response(staff.list_staff())
    s = StaffSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('createdBy') is None and request.user.upstream_user_id:
        data['createdBy'] = request.user.upstream_user_id
    member = staff.create_staff(data)
    logger.info('Staff %s created by %s', member.get('userId'), request.user.username)
    return Response(member, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('staff')])
def staff_detail(request, user_id: int):
    if request.method == 'GET':
        return Response(staff.get_staff(user_id))
    if request.method == 'PUT':
        s = StaffSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(staff.update_staff(user_id, s.validated_data))
    staff.delete_staff(user_id)
    logger.info('Staff %s deleted by %s', user_id, request.user.username)
    return Response({'ok': True})
