"""
Patient appointments adapter (``/patient-appointments``).

Appointments carry the OPD token issued at the front desk and the
consultation outcome recorded by the doctor.  Yes/No flags travel as
booleans on the portal side.
"""
from __future__ import annotations

from typing import Any, Optional

from .base import ApiError, InvalidRequest, api_request, ensure_success
from .normalize import (
    F, extract_records, normalize_record, paginate, to_backend, to_bool, to_float, to_int, to_str, yes_no,
)

APPOINTMENT_STATUSES = ('Waiting', 'Consulting', 'Completed')
PAGINATION_MARKERS = ('totalCount', 'total', 'totalPages', 'count')


def appointment_date(value: Any) -> str:
    return to_str(value).split('T')[0]


def _id_str(value: Any) -> Optional[str]:
    return str(value) if value not in (None, '', 0) else None


APPOINTMENT_FIELDS = (
    F('id', 'PatientAppointmentId', 'patientAppointmentId', 'id', coerce=to_int, default=0),
    F('patientId', 'PatientId', 'patientId', coerce=to_str, default=''),
    F('patientName', 'PatientName', 'patientName'),
    F('patientNo', 'PatientNo', 'patientNo'),
    F('doctorId', 'DoctorId', 'doctorId', coerce=to_str, default=''),
    F('doctorName', 'DoctorName', 'doctorName'),
    F('appointmentDate', 'AppointmentDate', 'appointmentDate', coerce=appointment_date, default=''),
    F('appointmentTime', 'AppointmentTime', 'appointmentTime', coerce=to_str, default=''),
    F('tokenNo', 'TokenNo', 'tokenNo', coerce=to_str, default=''),
    F('appointmentStatus', 'AppointmentStatus', 'appointmentStatus', coerce=to_str, default='Waiting'),
    F('consultationCharge', 'ConsultationCharge', 'consultationCharge', coerce=to_float, default=0.0),
    F('diagnosis', 'Diagnosis', 'diagnosis'),
    F('followUpDetails', 'FollowUpDetails', 'followUpDetails'),
    F('prescriptionsUrl', 'PrescriptionsUrl', 'prescriptionsUrl'),
    F('toBeAdmitted', 'ToBeAdmitted', 'toBeAdmitted', coerce=to_bool, default=False),
    F('referToAnotherDoctor', 'ReferToAnotherDoctor', 'referToAnotherDoctor', coerce=to_bool, default=False),
    F('referredDoctorId', 'ReferredDoctorId', 'referredDoctorId', coerce=_id_str),
    F('transferToIPDOTICU', 'TransferToIPDOTICU', 'transferToIPDOTICU', coerce=to_bool, default=False),
    F('transferTo', 'TransferTo', 'transferTo'),
    F('transferDetails', 'TransferDetails', 'transferDetails'),
    F('billId', 'BillId', 'billId', coerce=_id_str),
    F('aadharId', 'AadharId', 'aadharId'),
    F('status', 'Status', 'status', coerce=to_str, default='Active'),
)

TO_BACKEND = {
    'patientId': 'PatientId',
    'doctorId': 'DoctorId',
    'appointmentDate': 'AppointmentDate',
    'appointmentTime': 'AppointmentTime',
    'appointmentStatus': 'AppointmentStatus',
    'consultationCharge': 'ConsultationCharge',
    'diagnosis': 'Diagnosis',
    'followUpDetails': 'FollowUpDetails',
    'prescriptionsUrl': 'PrescriptionsUrl',
    'referredDoctorId': 'ReferredDoctorId',
    'transferTo': 'TransferTo',
    'transferDetails': 'TransferDetails',
    'billId': 'BillId',
    'createdBy': 'CreatedBy',
}
YES_NO_FIELDS = {
    'toBeAdmitted': 'ToBeAdmitted',
    'referToAnotherDoctor': 'ReferToAnotherDoctor',
    'transferToIPDOTICU': 'TransferToIPDOTICU',
}


def map_appointment(record: dict) -> dict:
    appointment = normalize_record(record, APPOINTMENT_FIELDS)
    appointment['patientAppointmentId'] = f"PA-{appointment['id']}"
    return appointment


def _to_backend(data: dict) -> dict:
    body = to_backend(data, TO_BACKEND)
    for src, dst in YES_NO_FIELDS.items():
        if data.get(src) is not None:
            body[dst] = yes_no(data[src])
    for key in ('DoctorId', 'ReferredDoctorId', 'BillId'):
        if key in body:
            body[key] = to_int(body[key])
    if 'status' in data and isinstance(data['status'], bool):
        body['Status'] = 'Active' if data['status'] else 'InActive'
    elif data.get('status'):
        body['Status'] = to_str(data['status'])
    return body


def _one(payload: Any, message: str) -> dict:
    ensure_success(payload, message)
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_appointment(data)


def list_appointments(page: int = 1, limit: int = 10, *, status: Optional[str] = None,
                      appointment_status: Optional[str] = None, patient_id: Optional[str] = None,
                      doctor_id: Optional[int] = None, appointment_date: Optional[str] = None) -> dict:
    payload = api_request('/patient-appointments', params={
        'status': status,
        'appointmentStatus': appointment_status,
        'patientId': patient_id,
        'doctorId': doctor_id,
        'appointmentDate': appointment_date,
        'page': page,
        'limit': limit,
    })
    ensure_success(payload, 'Failed to fetch patient appointments')
    rows, total, has_more = paginate(payload, extract_records(payload) or [], page, limit, PAGINATION_MARKERS)
    appointments = [map_appointment(r) for r in rows if isinstance(r, dict)]
    return {'data': appointments, 'total': total, 'page': page, 'limit': limit, 'hasMore': has_more}


def list_for_patient(patient_id: str) -> list[dict]:
    payload = ensure_success(api_request(f'/patient-appointments/patient/{patient_id}'),
                             'Failed to fetch patient appointments')
    return [map_appointment(r) for r in extract_records(payload) or [] if isinstance(r, dict)]


def _check_id(appointment_id: int) -> None:
    if not isinstance(appointment_id, int) or appointment_id <= 0:
        raise InvalidRequest(f'Invalid PatientAppointmentId: {appointment_id}. Must be a positive integer.')


def get_appointment(appointment_id: int) -> dict:
    _check_id(appointment_id)
    return _one(api_request(f'/patient-appointments/{appointment_id}'),
                f'PatientAppointment with id {appointment_id} not found')


def create_appointment(data: dict) -> dict:
    missing = [label for key, label in (('patientId', 'PatientId'), ('doctorId', 'DoctorId'),
                                        ('appointmentDate', 'AppointmentDate'),
                                        ('appointmentTime', 'AppointmentTime'))
               if not to_str(data.get(key))]
    if missing:
        raise InvalidRequest(f'{", ".join(missing)} required')
    if to_bool(data.get('referToAnotherDoctor')) and not data.get('referredDoctorId'):
        raise InvalidRequest('ReferredDoctorId is required when referring to another doctor')
    body = _to_backend(data)
    body.setdefault('AppointmentStatus', 'Waiting')
    for key in YES_NO_FIELDS.values():
        body.setdefault(key, 'No')
    body.setdefault('Status', 'Active')
    return _one(api_request('/patient-appointments', 'POST', json_body=body), 'Failed to create patient appointment')


def update_appointment(appointment_id: int, data: dict) -> dict:
    _check_id(appointment_id)
    return _one(api_request(f'/patient-appointments/{appointment_id}', 'PUT', json_body=_to_backend(data)),
                'Failed to update patient appointment')


def delete_appointment(appointment_id: int) -> None:
    _check_id(appointment_id)
    ensure_success(api_request(f'/patient-appointments/{appointment_id}', 'DELETE'),
                   'Failed to delete patient appointment')
