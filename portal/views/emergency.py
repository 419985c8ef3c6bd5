"""
Emergency department views.

Beds and slots are managed under the ``emergency-beds`` screen;
admissions, vitals and the triage overview under ``emergency``.  The bed
board and the overview derive occupancy from the admissions list on
every request (see :mod:`portal.services.occupancy`); the upstream bed
status is never used for that.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from ..permissions import CanAccess
from ..serializers.resources import (
    EmergencyAdmissionQuerySerializer,
    EmergencyAdmissionSerializer,
    EmergencyBedSerializer,
    EmergencyBedSlotSerializer,
    VitalsSerializer,
)
from ..services import occupancy, triage
from ..upstream import emergency_admissions, emergency_bed_slots, emergency_beds

logger = logging.getLogger(__name__)

TRUTHY = {'1', 'true', 'yes'}


def _flag(request, name: str) -> bool:
    return (request.query_params.get(name) or '').lower() in TRUTHY


def _int_param(request, name: str):
    value = request.query_params.get(name)
    try:
        return int(value) if value else None
    except ValueError:
        return None


def build_bed_board(*, transfers_release: bool = False) -> dict:
    """Live beds, slots and admissions folded into one occupancy board."""
    beds = emergency_beds.list_beds()
    slots = emergency_bed_slots.list_slots()
    admissions = emergency_admissions.list_admissions()
    board = occupancy.bed_board(beds, admissions, slots, transfers_release=transfers_release)
    occupied_slots, free_slots = occupancy.partition_slots(slots, admissions, transfers_release=transfers_release)
    board['slots'] = {'occupied': occupied_slots, 'unoccupied': free_slots}
    return board


# -----------------------------------------------------------------------------
# Beds
# -----------------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('emergency-beds')])
def bed_list(request):
    if request.method == 'GET':
        return Response(emergency_beds.list_beds(request.query_params.get('status') or None))
    s = EmergencyBedSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('createdBy') is None and request.user.upstream_user_id:
        data['createdBy'] = request.user.upstream_user_id
    return Response(emergency_beds.create_bed(data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('emergency-beds')])
def bed_detail(request, bed_id: int):
    if request.method == 'GET':
        return Response(emergency_beds.get_bed(bed_id))
    if request.method == 'PUT':
        s = EmergencyBedSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(emergency_beds.update_bed(bed_id, s.validated_data))
    emergency_beds.delete_bed(bed_id)
    return Response({'ok': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('emergency-beds')])
def bed_board(request):
    """Occupied and free beds; ``?transfersRelease=1`` frees beds of transferred patients."""
    return Response(build_bed_board(transfers_release=_flag(request, 'transfersRelease')))


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('emergency-beds')])
def bed_slots(request, bed_id: int):
    return Response(emergency_bed_slots.list_slots_for_bed(bed_id))


# -----------------------------------------------------------------------------
# Slots
# -----------------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('emergency-beds')])
def slot_list(request):
    if request.method == 'GET':
        return Response(emergency_bed_slots.list_slots(
            request.query_params.get('status') or None, _int_param(request, 'emergencyBedId'),
        ))
    s = EmergencyBedSlotSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(emergency_bed_slots.create_slot(s.validated_data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('emergency-beds')])
def slot_detail(request, slot_id: int):
    if request.method == 'GET':
        return Response(emergency_bed_slots.get_slot(slot_id))
    if request.method == 'PUT':
        s = EmergencyBedSlotSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(emergency_bed_slots.update_slot(slot_id, s.validated_data))
    emergency_bed_slots.delete_slot(slot_id)
    return Response({'ok': True})


# -----------------------------------------------------------------------------
# Admissions
# -----------------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('emergency')])
def admission_list(request):
    if request.method == 'GET':
        q = EmergencyAdmissionQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        return Response(emergency_admissions.list_admissions(
            status=vd.get('status'),
            emergency_status=vd.get('emergencyStatus'),
            patient_id=vd.get('patientId'),
            doctor_id=vd.get('doctorId'),
            emergency_bed_slot_id=vd.get('emergencyBedSlotId'),
        ))
    s = EmergencyAdmissionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('admissionCreatedBy') is None and request.user.upstream_user_id:
        data['admissionCreatedBy'] = request.user.upstream_user_id
    admission = emergency_admissions.create_admission(data)
    logger.info('Emergency admission %s created for patient %s', admission.get('id'), admission.get('patientId'))
    return Response(admission, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('emergency')])
def admission_detail(request, admission_id: int):
    if request.method == 'GET':
        return Response(emergency_admissions.get_admission(admission_id))
    if request.method == 'PUT':
        s = EmergencyAdmissionSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(emergency_admissions.update_admission(admission_id, s.validated_data))
    emergency_admissions.delete_admission(admission_id)
    return Response({'ok': True})


# -----------------------------------------------------------------------------
# Vitals
# -----------------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanAccess('emergency')])
def vitals_list(request, admission_id: int):
    if request.method == 'GET':
        return Response(emergency_admissions.list_vitals(admission_id))
    s = VitalsSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if data.get('vitalsCreatedBy') is None and request.user.upstream_user_id:
        data['vitalsCreatedBy'] = request.user.upstream_user_id
    return Response(emergency_admissions.create_vitals(admission_id, data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanAccess('emergency')])
def vitals_detail(request, admission_id: int, vitals_id: int):
    if request.method == 'GET':
        return Response(emergency_admissions.get_vitals(admission_id, vitals_id))
    if request.method == 'PUT':
        s = VitalsSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(emergency_admissions.update_vitals(admission_id, vitals_id, s.validated_data))
    emergency_admissions.delete_vitals(admission_id, vitals_id)
    return Response({'ok': True})


# -----------------------------------------------------------------------------
# Overview
# -----------------------------------------------------------------------------
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanAccess('emergency')])
def emergency_overview(request):
    """Triage view of the emergency department.

    ``admissions`` is ordered by condition, ``queue`` holds patients still
    waiting in emergency ordered by priority, ``counts`` tallies priorities
    of patients in the department and ``beds`` is the bed board where a
    transfer to IPD, OT or ICU frees the bed.
    """
    admissions = emergency_admissions.list_admissions(status='Active')
    beds = emergency_beds.list_beds()
    slots = emergency_bed_slots.list_slots()
    return Response({
        'admissions': triage.sort_by_condition(admissions),
        'queue': triage.priority_queue(admissions),
        'counts': triage.priority_counts(admissions),
        'beds': occupancy.bed_board(beds, admissions, slots, transfers_release=True),
    })
