"""
IPD room admission views.

The bed board joins the room beds with the active room admissions on
every request (see :func:`portal.services.occupancy.room_bed_board`).
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import RoomAdmissionSerializer
from ..services import occupancy
from ..upstream import room_admissions, room_beds

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('admissions')])
def room_admission_list(request):
    """``?status=`` keeps one admission state (``Active``, ``Discharged`` ...)."""
    if request.method == 'GET':
        return Response(room_admissions.list_admissions(request.query_params.get('status') or None))
    s = RoomAdmissionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('createdBy') is None and request.user.upstream_user_id:
        data['createdBy'] = request.user.upstream_user_id
    return Response(room_admissions.create_admission(data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('admissions')])
def room_admission_detail(request, admission_id: int):
    if request.method == 'GET':
        return Response(room_admissions.get_admission(admission_id))
    if request.method == 'PUT':
        s = RoomAdmissionSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(room_admissions.update_admission(admission_id, s.validated_data))
    room_admissions.delete_admission(admission_id)
    logger.info('Room admission %s deleted by %s', admission_id, request.user.username)
    return Response({'ok': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('admissions')])
def room_bed_board(request):
    beds = room_beds.list_room_beds()
    admissions = room_admissions.list_admissions(room_admissions.ACTIVE)
    return Response(occupancy.room_bed_board(beds, admissions))


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('admissions')])
def room_capacity(request):
    return Response(room_admissions.get_capacity_overview())


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('admissions')])
def room_admission_metrics(request):
    return Response(room_admissions.get_dashboard_metrics())
