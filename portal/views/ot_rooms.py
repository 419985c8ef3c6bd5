"""
Operation theatre room views.

The list is paginated (``?page=&limit=``) and filterable by ``status``
and ``otType``; ``?all=1`` walks every page instead.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import OTRoomSerializer, PageQuerySerializer
from ..upstream import ot_rooms


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('ot-rooms')])
def ot_room_list(request):
    if request.method == 'GET':
        if (request.query_params.get('all') or '').lower() in {'1', 'true', 'yes'}:
            return Response(ot_rooms.list_all_ot_rooms())
        q = PageQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        return Response(ot_rooms.list_ot_rooms(vd['page'], vd['limit'], vd.get('status'), vd.get('otType')))
    s = OTRoomSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('createdBy') is None and request.user.upstream_user_id:
        data['createdBy'] = str(request.user.upstream_user_id)
    return Response(ot_rooms.create_ot_room(data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('ot-rooms')])
def ot_room_detail(request, ot_id: int):
    if request.method == 'GET':
        return Response(ot_rooms.get_ot_room(ot_id))
    if request.method == 'PUT':
        s = OTRoomSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(ot_rooms.update_ot_room(ot_id, s.validated_data))
    ot_rooms.delete_ot_room(ot_id)
    return Response({'ok': True})
