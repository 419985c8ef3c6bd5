"""Staff accounts adapter (``/users``).

The users endpoint wraps every answer in ``{"success": ..., "data": ...}``
and reports failures with ``success: false`` even on HTTP 200.
"""
from __future__ import annotations

from .base import ApiError, api_request, ensure_success
from .normalize import F, extract_records, normalize_record, to_backend, to_choice, to_float, to_int, to_str

YES_NO = ('Yes', 'No')

STAFF_FIELDS = (
    F('userId', 'UserId', 'userId', 'id', coerce=to_int, default=0),
    F('roleId', 'RoleId', 'roleId', coerce=to_str, default=''),
    F('userName', 'UserName', 'userName', coerce=to_str, default=''),
    F('phoneNo', 'PhoneNo', 'phoneNo', coerce=to_str, default=''),
    F('emailId', 'EmailId', 'emailId', coerce=to_str, default=''),
    F('doctorDepartmentId', 'DoctorDepartmentId', 'doctorDepartmentId', coerce=to_str, default=''),
    F('doctorQualification', 'DoctorQualification', 'doctorQualification', coerce=to_str, default=''),
    F('doctorType', 'DoctorType', 'doctorType', coerce=lambda v: to_choice(v, ('INHOUSE', 'VISITING'), ''), default=''),
    F('doctorOPDCharge', 'DoctorOPDCharge', 'doctorOPDCharge', coerce=to_float, default=0.0),
    F('doctorSurgeryCharge', 'DoctorSurgeryCharge', 'doctorSurgeryCharge', coerce=to_float, default=0.0),
    F('opdConsultation', 'OPDConsultation', 'opdConsultation', coerce=lambda v: to_choice(v, YES_NO, 'No'), default='No'),
    F('ipdVisit', 'IPDVisit', 'ipdVisit', coerce=lambda v: to_choice(v, YES_NO, 'No'), default='No'),
    F('otHandle', 'OTHandle', 'otHandle', coerce=lambda v: to_choice(v, YES_NO, 'No'), default='No'),
    F('icuVisits', 'ICUVisits', 'icuVisits', coerce=lambda v: to_choice(v, YES_NO, 'No'), default='No'),
    F('status', 'Status', 'status', coerce=lambda v: to_choice(v, ('Active', 'InActive'), 'Active'), default='Active'),
    F('createdBy', 'CreatedBy', 'createdBy'),
)

TO_BACKEND = {
    'roleId': 'RoleId',
    'userName': 'UserName',
    'password': 'Password',
    'phoneNo': 'PhoneNo',
    'emailId': 'EmailId',
    'doctorDepartmentId': 'DoctorDepartmentId',
    'doctorQualification': 'DoctorQualification',
    'doctorType': 'DoctorType',
    'doctorOPDCharge': 'DoctorOPDCharge',
    'doctorSurgeryCharge': 'DoctorSurgeryCharge',
    'opdConsultation': 'OPDConsultation',
    'ipdVisit': 'IPDVisit',
    'otHandle': 'OTHandle',
    'icuVisits': 'ICUVisits',
    'status': 'Status',
    'createdBy': 'CreatedBy',
}


def map_staff(record: dict) -> dict:
    return normalize_record(record, STAFF_FIELDS)


def _one(payload, message: str) -> dict:
    ensure_success(payload, message)
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_staff(data)


def list_staff() -> list[dict]:
    payload = ensure_success(api_request('/users'), 'Failed to fetch users')
    return [map_staff(r) for r in extract_records(payload) or [] if isinstance(r, dict)]


def get_staff(user_id: int) -> dict:
    return _one(api_request(f'/users/{user_id}'), 'Failed to fetch user')


def create_staff(data: dict) -> dict:
    body = to_backend(data, TO_BACKEND)
    body.setdefault('Status', 'Active')
    return _one(api_request('/users', 'POST', json_body=body), 'Failed to create user')


def update_staff(user_id: int, data: dict) -> dict:
    body = to_backend(data, TO_BACKEND)
    return _one(api_request(f'/users/{user_id}', 'PUT', json_body=body), 'Failed to update user')


def delete_staff(user_id: int) -> None:
    ensure_success(api_request(f'/users/{user_id}', 'DELETE'), 'Failed to delete user')
