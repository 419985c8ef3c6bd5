"""Patient registry adapter (``/patients``)."""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from .base import ApiError, InvalidRequest, api_request
from .normalize import F, extract_records, normalize_record, paginate, to_backend, to_int, to_str, unwrap

PATIENT_FIELDS = (
    F('patientId', 'PatientId', 'patientId'),
    F('patientNo', 'PatientNo', 'patientNo', coerce=to_str, default=''),
    F('patientName', 'PatientName', 'patientName', 'name', coerce=to_str, default=''),
    F('patientType', 'PatientType', 'patientType', coerce=to_str, default=''),
    F('lastName', 'LastName', 'lastName', coerce=to_str, default=''),
    F('adhaarID', 'AdhaarId', 'adhaarID', 'AdhaarID', coerce=to_str, default=''),
    F('panCard', 'PANCard', 'panCard', coerce=to_str, default=''),
    F('phoneNo', 'PhoneNo', 'phoneNo', 'phone', coerce=to_str, default=''),
    F('gender', 'Gender', 'gender', coerce=to_str, default=''),
    F('age', 'Age', 'age', coerce=to_int, default=0),
    F('address', 'Address', 'address', coerce=to_str, default=''),
    F('chiefComplaint', 'ChiefComplaint', 'chiefComplaint', coerce=to_str, default=''),
    F('description', 'Description', 'description', coerce=to_str, default=''),
    F('status', 'Status', 'status', coerce=to_str, default='Active'),
    F('registeredBy', 'RegisteredBy', 'registeredBy'),
    F('registeredDate', 'RegisteredDate', 'registeredDate', coerce=to_str, default=''),
)

TO_BACKEND = {
    'patientNo': 'PatientNo',
    'patientName': 'PatientName',
    'patientType': 'PatientType',
    'lastName': 'LastName',
    'adhaarID': 'AdhaarID',
    'panCard': 'PANCard',
    'phoneNo': 'PhoneNo',
    'gender': 'Gender',
    'age': 'Age',
    'address': 'Address',
    'chiefComplaint': 'ChiefComplaint',
    'description': 'Description',
    'status': 'Status',
    'registeredBy': 'RegisteredBy',
}

DEFAULT_REGISTERED_BY = 1


def map_patient(record: dict, index: int = 0) -> dict:
    patient = normalize_record(record, PATIENT_FIELDS)
    if patient['patientId'] is None:
        patient['patientId'] = f'PAT-TEMP-{index}'
    raw_id = record.get('id')
    patient['id'] = raw_id if raw_id is not None else patient['patientId']
    return patient


def _dedupe_ids(patients: list[dict]) -> None:
    seen = set()
    for index, patient in enumerate(patients):
        key = patient['id']
        if key in seen:
            patient['id'] = f'{key}-{index}'
        else:
            seen.add(key)


def list_patients(page: int = 1, limit: int = 10, phone: Optional[str] = None) -> dict:
    """Fetch one page of patients, slicing it locally for unpaginated backends."""
    payload = api_request('/patients', params={'page': page, 'limit': limit, 'phone': phone})
    rows, total, has_more = paginate(payload, extract_records(payload) or [], page, limit)
    patients = [map_patient(r, i) for i, r in enumerate(rows) if isinstance(r, dict)]
    _dedupe_ids(patients)
    return {'data': patients, 'total': total, 'page': page, 'limit': limit, 'hasMore': has_more}


def find_by_phone(phone: str) -> Optional[dict]:
    rows = extract_records(api_request('/patients', params={'phone': phone})) or []
    return map_patient(rows[0]) if rows and isinstance(rows[0], dict) else None


def get_patient(patient_id: str) -> dict:
    data = unwrap(api_request(f'/patients/{quote(str(patient_id), safe="")}'))
    if not isinstance(data, dict):
        raise ApiError(f'Patient with PatientId {patient_id} not found', 404)
    return map_patient(data)


def create_patient(data: dict) -> dict:
    body = _to_backend(data)
    for field, label in (('PatientName', 'Patient Name'), ('PhoneNo', 'Phone Number'), ('Gender', 'Gender')):
        if not body.get(field):
            raise InvalidRequest(f'{label} is required')
    if to_int(body.get('Age')) <= 0:
        raise InvalidRequest('Age must be a valid positive number')
    body['Age'] = to_int(body['Age'])
    body['RegisteredBy'] = to_int(body.get('RegisteredBy'), DEFAULT_REGISTERED_BY) or DEFAULT_REGISTERED_BY
    # Status and RegisteredDate are assigned upstream
    body.pop('Status', None)
    created = unwrap(api_request('/patients', 'POST', json_body=body))
    if not isinstance(created, dict):
        raise ApiError('No patient data received from API', 502, created)
    return map_patient(created)


def update_patient(patient_id: str, data: dict) -> dict:
    if not patient_id:
        raise InvalidRequest('PatientId is required for update operation')
    body = {'PatientId': patient_id, **_to_backend(data)}
    payload = api_request(f'/patients/{quote(str(patient_id), safe="")}', 'PUT', json_body=body)
    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    updated = unwrap(payload)
    return map_patient(updated if isinstance(updated, dict) else body)


def delete_patient(patient_id: str) -> None:
    api_request(f'/patients/{quote(str(patient_id), safe="")}', 'DELETE')


def record_follow_up(patient_id: str) -> dict:
    data = unwrap(api_request(f'/patients/{quote(str(patient_id), safe="")}/follow-up', 'POST'))
    return map_patient(data if isinstance(data, dict) else {'PatientId': patient_id})


def _to_backend(data: dict) -> dict:
    return to_backend(data, TO_BACKEND)
