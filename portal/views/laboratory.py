"""Laboratory test catalogue views."""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import LabTestSerializer
from ..upstream import lab_tests


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('laboratory')])
def lab_test_list(request):
    if request.method == 'GET':
        return Response(lab_tests.list_lab_tests(request.query_params.get('category') or None))
    s = LabTestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(lab_tests.create_lab_test(s.validated_data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('laboratory')])
def lab_test_detail(request, lab_test_id: int):
    if request.method == 'GET':
        return Response(lab_tests.get_lab_test(lab_test_id))
    if request.method == 'PUT':
        s = LabTestSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(lab_tests.update_lab_test(lab_test_id, s.validated_data))
    lab_tests.delete_lab_test(lab_test_id)
    return Response({'ok': True})
