"""OT scheduling views: theatre slots and patient OT allocations."""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import OTAllocationSerializer, OTSlotQuerySerializer, OTSlotSerializer
from ..upstream import ot_allocations, ot_slots

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('ot')])
def ot_slot_list(request):
    """``?otId=OT-01&date=YYYY-MM-DD`` narrows the list to one theatre and day."""
    if request.method == 'GET':
        q = OTSlotQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        day = vd.get('date')
        return Response(ot_slots.list_ot_slots(vd.get('status'), vd.get('otId'), day.isoformat() if day else None))
    s = OTSlotSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(ot_slots.create_ot_slot(s.validated_data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('ot')])
def ot_slot_detail(request, slot_id: int):
    if request.method == 'GET':
        return Response(ot_slots.get_ot_slot(slot_id))
    if request.method == 'PUT':
        s = OTSlotSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(ot_slots.update_ot_slot(slot_id, s.validated_data))
    ot_slots.delete_ot_slot(slot_id)
    return Response({'ok': True})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('ot')])
def ot_allocation_list(request):
    if request.method == 'GET':
        return Response(ot_allocations.list_allocations())
    s = OTAllocationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('otAllocationCreatedBy') is None and request.user.upstream_user_id:
        data['otAllocationCreatedBy'] = request.user.upstream_user_id
    allocation = ot_allocations.create_allocation(data)
    logger.info('OT allocation %s created for patient %s', allocation.get('id'), allocation.get('patientId'))
    return Response(allocation, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('ot')])
def ot_allocation_detail(request, allocation_id: int):
    if request.method == 'GET':
        return Response(ot_allocations.get_allocation(allocation_id))
    if request.method == 'PUT':
        s = OTAllocationSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(ot_allocations.update_allocation(allocation_id, s.validated_data))
    ot_allocations.delete_allocation(allocation_id)
    logger.info('OT allocation %s deleted by %s', allocation_id, request.user.username)
    return Response({'ok': True})
