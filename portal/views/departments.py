"""
Doctor department views.

``GET /api/departments`` accepts ``?category=`` to list one department
category only.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import DepartmentSerializer
from ..upstream import departments as upstream


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('departments')])
def departments(request):
    if request.method == 'GET':
        return Response(upstream.list_departments(request.query_params.get('category') or None))
    s = DepartmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(upstream.create_department(s.validated_data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('departments')])
def department_detail(request, department_id: int):
    if request.method == 'GET':
        return Response(upstream.get_department(department_id))
    if request.method == 'PUT':
        s = DepartmentSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(upstream.update_department(department_id, s.validated_data))
    upstream.delete_department(department_id)
    return Response({'ok': True})
