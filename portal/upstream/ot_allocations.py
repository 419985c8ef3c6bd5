"""
Patient OT allocations adapter (``/patient-ot-allocations``).

The backend writes the running state as ``"In Progress"``; the portal
uses ``InProgress`` and converts in both directions.
"""
from __future__ import annotations

from typing import Any

from .base import ApiError, InvalidRequest, api_request, ensure_success
from .normalize import F, normalize_record, to_backend, to_int, to_iso, to_str

OPERATION_STATUSES = ('Scheduled', 'InProgress', 'Completed', 'Cancelled', 'Postponed')


def operation_status(value: Any) -> str:
    text = to_str(value).replace(' ', '')
    for choice in OPERATION_STATUSES:
        if choice.lower() == text.lower():
            return choice
    return 'Scheduled'


def backend_operation_status(value: Any) -> str:
    status = operation_status(value)
    return 'In Progress' if status == 'InProgress' else status


def _slot_ids(value: Any):
    if isinstance(value, (list, tuple)):
        return [to_int(v) for v in value]
    return None


ALLOCATION_FIELDS = (
    F('id', 'PatientOTAllocationId', 'patientOTAllocationId', 'id', coerce=to_int, default=0),
    F('patientId', 'PatientId', 'patientId', coerce=to_str, default=''),
    F('patientName', 'PatientName', 'patientName'),
    F('patientNo', 'PatientNo', 'patientNo'),
    F('roomAdmissionId', 'RoomAdmissionId', 'roomAdmissionId'),
    F('patientAppointmentId', 'PatientAppointmentId', 'patientAppointmentId', coerce=to_str),
    F('emergencyBedSlotId', 'EmergencyBedSlotId', 'emergencyBedSlotId'),
    F('otId', 'OTId', 'otId', coerce=to_int, default=0),
    F('otNo', 'OTNo', 'otNo'),
    F('surgeryId', 'SurgeryId', 'surgeryId'),
    F('leadSurgeonId', 'LeadSurgeonId', 'leadSurgeonId', coerce=to_int, default=0),
    F('leadSurgeonName', 'LeadSurgeonName', 'leadSurgeonName'),
    F('assistantDoctorId', 'AssistantDoctorId', 'assistantDoctorId'),
    F('anaesthetistId', 'AnaesthetistId', 'anaesthetistId'),
    F('nurseId', 'NurseId', 'nurseId'),
    F('otAllocationDate', 'OTAllocationDate', 'otAllocationDate', coerce=to_iso, default=''),
    F('dateOfOperation', 'DateOfOperation', 'dateOfOperation'),
    F('duration', 'Duration', 'duration', coerce=to_str),
    F('otStartTime', 'OTStartTime', 'otStartTime'),
    F('otEndTime', 'OTEndTime', 'otEndTime'),
    F('otActualStartTime', 'OTActualStartTime', 'otActualStartTime'),
    F('otActualEndTime', 'OTActualEndTime', 'otActualEndTime'),
    F('operationDescription', 'OperationDescription', 'operationDescription'),
    F('operationStatus', 'OperationStatus', 'operationStatus', coerce=operation_status, default='Scheduled'),
    F('preOperationNotes', 'PreOperationNotes', 'preOperationNotes'),
    F('postOperationNotes', 'PostOperationNotes', 'postOperationNotes'),
    F('billId', 'BillId', 'billId'),
    F('otAllocationCreatedBy', 'OTAllocationCreatedBy', 'otAllocationCreatedBy'),
    F('otAllocationCreatedAt', 'OTAllocationCreatedAt', 'otAllocationCreatedAt', coerce=to_iso),
    F('status', 'Status', 'status', coerce=lambda v: 'Active' if to_str(v).lower() == 'active' else 'InActive',
      default='InActive'),
    F('otSlotIds', 'OTSlotIds', 'otSlotIds', coerce=_slot_ids),
)

TO_BACKEND = {
    'patientId': 'PatientId',
    'roomAdmissionId': 'RoomAdmissionId',
    'patientAppointmentId': 'PatientAppointmentId',
    'emergencyBedSlotId': 'EmergencyBedSlotId',
    'otId': 'OTId',
    'surgeryId': 'SurgeryId',
    'leadSurgeonId': 'LeadSurgeonId',
    'assistantDoctorId': 'AssistantDoctorId',
    'anaesthetistId': 'AnaesthetistId',
    'nurseId': 'NurseId',
    'otAllocationDate': 'OTAllocationDate',
    'dateOfOperation': 'DateOfOperation',
    'duration': 'Duration',
    'otStartTime': 'OTStartTime',
    'otEndTime': 'OTEndTime',
    'otActualStartTime': 'OTActualStartTime',
    'otActualEndTime': 'OTActualEndTime',
    'operationDescription': 'OperationDescription',
    'preOperationNotes': 'PreOperationNotes',
    'postOperationNotes': 'PostOperationNotes',
    'billId': 'BillId',
    'otSlotIds': 'OTSlotIds',
    'otAllocationCreatedBy': 'OTAllocationCreatedBy',
    'status': 'Status',
}


def map_allocation(record: dict) -> dict:
    return normalize_record(record, ALLOCATION_FIELDS)


def _to_backend(data: dict) -> dict:
    body = to_backend(data, TO_BACKEND)
    if data.get('operationStatus') is not None:
        body['OperationStatus'] = backend_operation_status(data['operationStatus'])
    if 'PatientAppointmentId' in body:
        body['PatientAppointmentId'] = to_int(body['PatientAppointmentId'])
    if 'Duration' in body:
        body['Duration'] = to_int(body['Duration'])
    if not body.get('OTSlotIds'):
        body.pop('OTSlotIds', None)
    return body


def _one(payload: Any, message: str) -> dict:
    ensure_success(payload, message)
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_allocation(data)


def list_allocations() -> list[dict]:
    payload = api_request('/patient-ot-allocations')
    if not (isinstance(payload, dict) and payload.get('success') and isinstance(payload.get('data'), list)):
        return []
    return [map_allocation(r) for r in payload['data'] if isinstance(r, dict)]


def get_allocation(allocation_id: int) -> dict:
    return _one(api_request(f'/patient-ot-allocations/{allocation_id}'), 'Failed to fetch patient OT allocation')


def create_allocation(data: dict) -> dict:
    missing = [label for key, label in (('patientId', 'PatientId'), ('otId', 'OTId'),
                                        ('leadSurgeonId', 'LeadSurgeonId'), ('otAllocationDate', 'OTAllocationDate'))
               if data.get(key) in (None, '')]
    if missing:
        raise InvalidRequest(f'{", ".join(missing)} required')
    body = _to_backend(data)
    body.setdefault('Status', 'Active')
    return _one(api_request('/patient-ot-allocations', 'POST', json_body=body),
                'Failed to create patient OT allocation')


def update_allocation(allocation_id: int, data: dict) -> dict:
    return _one(api_request(f'/patient-ot-allocations/{allocation_id}', 'PUT', json_body=_to_backend(data)),
                'Failed to update patient OT allocation')


def delete_allocation(allocation_id: int) -> None:
    ensure_success(api_request(f'/patient-ot-allocations/{allocation_id}', 'DELETE'),
                   'Failed to delete patient OT allocation')
