"""
Patient appointment views.

The front desk books appointments and hands out tokens; doctors read the
same appointments and record the consultation outcome, so both screens
open these endpoints.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import AppointmentQuerySerializer, AppointmentSerializer
from ..upstream import appointments

logger = logging.getLogger(__name__)

APPOINTMENT_SCREENS = ('frontdesk', 'consultation')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess(*APPOINTMENT_SCREENS)])
def appointment_list(request):
    if request.method == 'GET':
        q = AppointmentQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        return Response(appointments.list_appointments(
            vd['page'], vd['limit'],
            status=vd.get('status'),
            appointment_status=vd.get('appointmentStatus'),
            patient_id=vd.get('patientId'),
            doctor_id=vd.get('doctorId'),
            appointment_date=vd.get('appointmentDate'),
        ))
    s = AppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('createdBy') is None and request.user.upstream_user_id:
        data['createdBy'] = request.user.upstream_user_id
    appointment = appointments.create_appointment(data)
    logger.info('Appointment %s booked with token %s', appointment['id'], appointment['tokenNo'])
    return Response(appointment, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess(*APPOINTMENT_SCREENS)])
def appointment_detail(request, appointment_id: int):
    if request.method == 'GET':
        return Response(appointments.get_appointment(appointment_id))
    if request.method == 'PUT':
        s = AppointmentSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(appointments.update_appointment(appointment_id, s.validated_data))
    appointments.delete_appointment(appointment_id)
    return Response({'ok': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess(*APPOINTMENT_SCREENS)])
def patient_appointments(request, patient_id: str):
    return Response(appointments.list_for_patient(patient_id))
