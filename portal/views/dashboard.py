"""
Dashboard endpoints.

Counts, OPD flow, room distribution and the doctor queue come from the
upstream ``/dashboard/*`` endpoints.  The dashboard never fails: any
error (or an empty or unrecognised answer) is replaced by fixture data,
whatever the stub setting says.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import CanAccess
from ..upstream import dashboard


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('dashboard')])
def dashboard_overview(request):
    return Response(dashboard.get_overview())


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('dashboard')])
def dashboard_stats(request):
    return Response(dashboard.get_stats())


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('dashboard')])
def dashboard_opd_flow(request):
    return Response(dashboard.get_opd_flow())


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('dashboard')])
def dashboard_room_distribution(request):
    return Response(dashboard.get_room_distribution())


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('dashboard')])
def dashboard_doctor_queue(request):
    return Response(dashboard.get_doctor_queue())
