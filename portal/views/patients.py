"""
Patient registration views.

Patients live upstream; these endpoints validate and clean the request
body, then hand it to :mod:`portal.upstream.patients`.  ``?phone=`` on
the list narrows the search to one phone number.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import PatientListQuerySerializer, PatientSerializer
from ..upstream import patients
from ..upstream.base import ApiError, InvalidRequest

logger = logging.getLogger(__name__)


def _created_by(request) -> dict:
    upstream_id = getattr(request.user, 'upstream_user_id', None)
    return {'registeredBy': upstream_id} if upstream_id else {}


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('patient-registration')])
def patient_list(request):
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        return Response(patients.list_patients(vd['page'], vd['limit'], vd.get('phone') or None))

    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = {**_created_by(request), **s.validated_data}
    patient = patients.create_patient(data)
    logger.info('Patient %s registered by %s', patient.get('patientId'), request.user.username)
    return Response(patient, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('patient-registration')])
def patient_lookup(request):
    """The patient registered under ``?phone=``; 404 when nobody is."""
    phone = (request.query_params.get('phone') or '').strip()
    if not phone:
        raise InvalidRequest('phone is required')
    patient = patients.find_by_phone(phone)
    if patient is None:
        raise ApiError(f'No patient registered with phone {phone}', 404)
    return Response(patient)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('patient-registration')])
def patient_detail(request, patient_id: str):
    if request.method == 'GET':
        return Response(patients.get_patient(patient_id))
    if request.method == 'PUT':
        s = PatientSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(patients.update_patient(patient_id, s.validated_data))
    patients.delete_patient(patient_id)
    logger.info('Patient %s deleted by %s', patient_id, request.user.username)
    return Response({'ok': True})


@api_view(['POST'])
@permission_classes([IsAuthenticated, CanAccess('patient-registration')])
def patient_follow_up(request, patient_id: str):
    """Register a follow-up visit for an existing patient."""
    return Response(patients.record_follow_up(patient_id))
