"""Doctor departments adapter (``/doctor-departments``)."""
from __future__ import annotations

from typing import Optional

from .base import ApiError, api_request, ensure_success
from .normalize import F, extract_records, normalize_record, to_choice, to_int, to_str

DEPARTMENT_FIELDS = (
    F('id', 'DoctorDepartmentId', 'doctorDepartmentId', 'DepartmentId', 'id', coerce=to_int, default=0),
    F('name', 'DepartmentName', 'departmentName', 'name', coerce=to_str, default=''),
    F('category', 'DepartmentCategory', 'departmentCategory', 'category', coerce=to_str, default=''),
    F('description', 'Description', 'description', coerce=to_str, default=''),
    F('specialisationDetails', 'SpecialisationDetails', 'specialisationDetails', coerce=to_str, default=''),
    F('noOfDoctors', 'NoOfDoctors', 'noOfDoctors', coerce=to_int, default=0),
    F('status', 'Status', 'status', coerce=lambda v: to_choice(v, ('active', 'inactive'), 'inactive'),
      default='inactive'),
    F('createdAt', 'CreatedAt', 'createdAt', coerce=to_str, default=''),
)


def map_department(record: dict) -> dict:
    return normalize_record(record, DEPARTMENT_FIELDS)


def to_backend_department(data: dict) -> dict:
    """Only keys present in ``data`` are sent, so updates stay partial.

    An explicitly blank description is sent as ``null`` to clear it.
    """
    body: dict = {}
    if 'name' in data:
        body['DepartmentName'] = to_str(data['name'])
    if 'category' in data:
        body['DepartmentCategory'] = to_str(data['category'])
    if 'description' in data:
        body['Description'] = to_str(data['description']) or None
    if 'specialisationDetails' in data:
        body['SpecialisationDetails'] = to_str(data['specialisationDetails'])
    if 'noOfDoctors' in data and data['noOfDoctors'] is not None:
        body['NoOfDoctors'] = to_int(data['noOfDoctors'])
    if 'status' in data:
        body['Status'] = 'Active' if to_str(data['status']).lower() == 'active' else 'Inactive'
    return body


def _one(payload, message: str) -> dict:
    ensure_success(payload, message)
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_department(data)


def list_departments(category: Optional[str] = None) -> list[dict]:
    payload = ensure_success(api_request('/doctor-departments', params={'category': category}),
                             'Failed to fetch departments')
    return [map_department(r) for r in extract_records(payload) or [] if isinstance(r, dict)]


def get_department(department_id: int) -> dict:
    return _one(api_request(f'/doctor-departments/{department_id}'), 'Failed to fetch department')


def create_department(data: dict) -> dict:
    body = to_backend_department({'status': 'active', **data})
    return _one(api_request('/doctor-departments', 'POST', json_body=body), 'Failed to create department')


def update_department(department_id: int, data: dict) -> dict:
    body = to_backend_department(data)
    return _one(api_request(f'/doctor-departments/{department_id}', 'PUT', json_body=body),
                'Failed to update department')


def delete_department(department_id: int) -> None:
    ensure_success(api_request(f'/doctor-departments/{department_id}', 'DELETE'), 'Failed to delete department')
