"""
ICU views.

Bed inventory and the occupancy figures sit under the ``icu-beds`` screen;
patient admissions, the per-bed layout and the ICU summary under ``icu``.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import IcuAdmissionSerializer, IcuBedSerializer
from ..upstream import icu_admissions, icu_beds


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('icu-beds')])
def icu_bed_list(request):
    """``?type=`` lists one ICU type only; that lookup never fails."""
    if request.method == 'GET':
        icu_type = request.query_params.get('type')
        if icu_type:
            return Response(icu_beds.list_by_type(icu_type))
        return Response(icu_beds.list_icu_beds())
    s = IcuBedSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(icu_beds.create_icu_bed(s.validated_data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('icu-beds')])
def icu_bed_detail(request, icu_bed_id: int):
    if request.method == 'GET':
        return Response(icu_beds.get_icu_bed(icu_bed_id))
    if request.method == 'PUT':
        s = IcuBedSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(icu_beds.update_icu_bed(icu_bed_id, s.validated_data))
    icu_beds.delete_icu_bed(icu_bed_id)
    return Response({'ok': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('icu-beds')])
def icu_occupancy(request):
    return Response(icu_beds.get_occupancy())


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('icu')])
def icu_admission_list(request):
    if request.method == 'GET':
        return Response(icu_admissions.list_icu_admissions())
    s = IcuAdmissionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('createdBy') is None and request.user.upstream_user_id:
        data['createdBy'] = request.user.upstream_user_id
    return Response(icu_admissions.create_icu_admission(data), status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('icu')])
def icu_bed_layout(request):
    return Response(icu_admissions.bed_layout())


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('icu')])
def icu_bed_layout_detail(request, icu_bed_id: int):
    return Response(icu_admissions.bed_details(icu_bed_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('icu')])
def icu_summary(request):
    """Occupancy plus the critical and ventilated patient counts."""
    return Response(icu_admissions.icu_summary())
