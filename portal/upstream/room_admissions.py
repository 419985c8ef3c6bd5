"""
IPD room admissions adapter (``/room-admissions``).

Reads go through ``/room-admissions/data``; the backend spells admission
states and room types several ways, and both are folded into the fixed
vocabularies below before anything leaves this module.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from . import stubs
from .base import ApiError, InvalidRequest, api_request, ensure_success, with_stub_fallback
from .normalize import F, extract_records, normalize_record, to_int, to_iso, to_str, unwrap, yes_no

logger = logging.getLogger(__name__)

ACTIVE = 'Active'
DISCHARGED = 'Discharged'
MOVED_TO_ICU = 'Moved to ICU'
SURGERY_SCHEDULED = 'Surgery Scheduled'
ADMISSION_STATUSES = (ACTIVE, DISCHARGED, MOVED_TO_ICU, SURGERY_SCHEDULED)

ROOM_TYPES = ('Regular Ward', 'Special Shared Room', 'Special Room')


def admission_status(value: Any) -> str:
    """Map any upstream spelling of an admission state onto ``ADMISSION_STATUSES``."""
    lowered = to_str(value).lower()
    if lowered in ('discharged', 'discharge'):
        return DISCHARGED
    if 'icu' in lowered:
        return MOVED_TO_ICU
    if 'surgery' in lowered or 'ot' in lowered.split():
        return SURGERY_SCHEDULED
    return ACTIVE


def room_type(value: Any) -> str:
    lowered = to_str(value).lower()
    if 'special' in lowered and 'shared' in lowered:
        return 'Special Shared Room'
    if 'special' in lowered:
        return 'Special Room'
    return 'Regular Ward'


ADMISSION_FIELDS = (
    F('id', 'RoomAdmissionId', 'roomAdmissionId', 'AdmissionId', 'admissionId', 'id', coerce=to_int, default=0),
    F('patientId', 'PatientId', 'patientId', coerce=to_str, default=''),
    F('patientNo', 'PatientNo', 'patientNo', coerce=to_str, default=''),
    F('patientName', 'PatientName', 'patientName', coerce=to_str, default=''),
    F('age', 'Age', 'age', coerce=to_int, default=0),
    F('gender', 'Gender', 'gender', coerce=to_str, default=''),
    F('admissionDate', 'RoomAllocationDate', 'AdmissionDate', 'admissionDate', coerce=to_iso, default=''),
    F('roomType', 'RoomType', 'roomType', coerce=room_type, default='Regular Ward'),
    F('roomBedId', 'RoomBedsId', 'roomBedsId', 'RoomBedId', 'roomBedId', coerce=to_int, default=0),
    F('bedNumber', 'BedNo', 'BedNumber', 'bedNumber', 'bedNo', coerce=to_str, default=''),
    F('roomNo', 'RoomNo', 'roomNo', coerce=to_str, default=''),
    F('admittedBy', 'AdmittedBy', 'admittedBy', 'AdmittingDoctorName', coerce=to_str, default=''),
    F('doctorId', 'AdmittingDoctorId', 'DoctorId', 'doctorId', coerce=to_int, default=0),
    F('diagnosis', 'Diagnosis', 'diagnosis', coerce=to_str, default=''),
    F('estimatedStay', 'EstimatedStay', 'estimatedStay', coerce=to_str, default=''),
    F('scheduleOT', 'ScheduleOT', 'scheduleOT', coerce=yes_no, default='No'),
    F('status', 'AdmissionStatus', 'Status', 'status', coerce=admission_status, default=ACTIVE),
)


def map_admission(record: dict) -> dict:
    return normalize_record(record, ADMISSION_FIELDS)


def _one(payload: Any, message: str) -> dict:
    ensure_success(payload, message)
    data = unwrap(payload)
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_admission(data)


def _to_backend(data: dict) -> dict:
    body: dict = {}
    for src, dst in (('patientId', 'PatientId'), ('patientName', 'PatientName'), ('bedNumber', 'BedNo'),
                     ('admittedBy', 'AdmittedBy'), ('diagnosis', 'Diagnosis'), ('admissionDate', 'RoomAllocationDate'),
                     ('estimatedStay', 'EstimatedStay')):
        if data.get(src) is not None:
            body[dst] = to_str(data[src])
    if data.get('roomType') is not None:
        body['RoomType'] = room_type(data['roomType'])
    if data.get('roomBedId') is not None:
        body['RoomBedsId'] = to_int(data['roomBedId'])
    if data.get('doctorId') is not None:
        body['AdmittingDoctorId'] = to_int(data['doctorId'])
    if data.get('scheduleOT') is not None:
        body['ScheduleOT'] = yes_no(data['scheduleOT'])
    if data.get('status') is not None:
        body['AdmissionStatus'] = admission_status(data['status'])
    if data.get('createdBy') is not None:
        body['AllocationCreatedBy'] = to_int(data['createdBy'])
    return body


def list_admissions(status: Optional[str] = None) -> list[dict]:
    payload = ensure_success(api_request('/room-admissions/data'), 'Failed to fetch room admissions')
    rows = [map_admission(r) for r in extract_records(payload) or [] if isinstance(r, dict)]
    if status:
        wanted = admission_status(status)
        rows = [r for r in rows if r['status'] == wanted]
    return rows


def get_admission(admission_id: int) -> dict:
    return _one(api_request(f'/room-admissions/data/{admission_id}'),
                f'Room admission with id {admission_id} not found')


def create_admission(data: dict) -> dict:
    missing = [label for key, label in (('patientId', 'PatientId'), ('patientName', 'PatientName'),
                                        ('bedNumber', 'BedNo'), ('admittedBy', 'AdmittedBy'))
               if not to_str(data.get(key))]
    if missing:
        raise InvalidRequest(f'{", ".join(missing)} required to admit a patient')
    body = _to_backend(data)
    body.setdefault('AdmissionStatus', ACTIVE)
    admission = _one(api_request('/room-admissions', 'POST', json_body=body), 'Failed to create room admission')
    logger.info('Room admission %s created on bed %s', admission['id'], admission['bedNumber'])
    return admission


def update_admission(admission_id: int, data: dict) -> dict:
    return _one(api_request(f'/room-admissions/{admission_id}', 'PUT', json_body=_to_backend(data)),
                'Failed to update room admission')


def delete_admission(admission_id: int) -> None:
    ensure_success(api_request(f'/admissions/{admission_id}', 'DELETE'), 'Failed to delete admission')


def map_capacity(payload: Any) -> list[dict]:
    """One row per room type; ``available`` defaults to the free remainder."""
    data = unwrap(payload)
    rows = extract_records(data)
    if rows is None and isinstance(data, dict):
        rows = [{'roomType': key, **value} for key, value in data.items() if isinstance(value, dict)]
    result = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        total = to_int(row.get('total', row.get('Total')))
        occupied = to_int(row.get('occupied', row.get('Occupied')))
        available = row.get('available', row.get('Available'))
        result.append({
            'roomType': room_type(row.get('roomType') or row.get('RoomType')),
            'total': total,
            'occupied': occupied,
            'available': to_int(available) if available is not None else max(0, total - occupied),
        })
    return result


def get_capacity_overview() -> list[dict]:
    return with_stub_fallback(
        lambda: map_capacity(api_request('/room-admissions/capacity-overview')),
        stubs.room_capacity,
        label='room capacity overview',
    )


def map_metrics(payload: Any) -> dict:
    data = unwrap(payload)
    if not isinstance(data, dict):
        data = {}
    occupied = to_int(data.get('totalOccupied'))
    capacity = to_int(data.get('totalCapacity'))
    return {
        'totalAdmissions': to_int(data.get('totalAdmissions')),
        'activePatients': to_int(data.get('activePatients')),
        'totalOccupied': occupied,
        'totalCapacity': capacity,
        'availableBeds': max(0, capacity - occupied),
        'bedOccupancy': round(occupied * 100 / capacity) if capacity else 0,
        'avgStay': to_str(data.get('avgStay'), '0'),
    }


def get_dashboard_metrics() -> dict:
    return map_metrics(api_request('/room-admissions/dashboard-metrics'))
