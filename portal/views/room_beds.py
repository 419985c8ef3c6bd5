from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import RoomBedSerializer
from ..upstream import room_beds


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('room-beds')])
def room_bed_list(request):
    if request.method == 'GET':
        return Response(room_beds.list_room_beds(
            request.query_params.get('roomNo') or None, request.query_params.get('category') or None,
        ))
    s = RoomBedSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('createdBy') is None and request.user.upstream_user_id:
        data['createdBy'] = str(request.user.upstream_user_id)
    return Response(room_beds.create_room_bed(data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('room-beds')])
def room_bed_detail(request, room_bed_id: int):
    if request.method == 'GET':
        return Response(room_beds.get_room_bed(room_bed_id))
    if request.method == 'PUT':
        s = RoomBedSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(room_beds.update_room_bed(room_bed_id, s.validated_data))
    room_beds.delete_room_bed(room_bed_id)
    return Response({'ok': True})
