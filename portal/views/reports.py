"""Hospital-wide report endpoint."""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import CanAccess
from ..services import reports


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('reports')])
def report_summary(request):
    """IPD metrics, room capacity, ICU figures, operations by state and lab tests per category."""
    return Response(reports.build_report())
