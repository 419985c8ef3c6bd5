"""Emergency beds adapter (``/emergency-beds``).

The upstream reports bed ``Status`` as ``Unoccupied``/``Occupied``/
``Inactive``; records here carry ``active``/``occupied``/``inactive``.
That field is informational only: occupancy is derived from admissions
in :mod:`portal.services.occupancy`.
"""
from __future__ import annotations

import random
import time
from typing import Optional

from .base import ApiError, InvalidRequest, api_request
from .normalize import F, extract_records, normalize_record, pick, to_float, to_int, to_iso, to_str, unwrap

# frontend status -> upstream status
BACKEND_STATUS = {'active': 'Active', 'inactive': 'Inactive', 'occupied': 'Occupied'}


def bed_status(value) -> str:
    lowered = to_str(value).lower()
    if lowered in ('occupied', 'inactive'):
        return lowered
    return 'active'


BED_FIELDS = (
    F('id', 'EmergencyBedId', 'emergencyBedId', coerce=to_int, default=0),
    F('emergencyBedNo', 'EmergencyBedNo', 'emergencyBedNo', coerce=to_str, default=''),
    F('emergencyRoomNameNo', 'EmergencyRoomNameNo', 'emergencyRoomNameNo', coerce=to_str, default=''),
    F('emergencyRoomDescription', 'EmergencyRoomDescription', 'emergencyRoomDescription', coerce=to_str, default=''),
    F('chargesPerDay', 'ChargesPerDay', 'chargesPerDay', coerce=to_float, default=0.0),
    F('createdBy', 'CreatedBy', 'createdBy', coerce=to_str, default=''),
    F('createdAt', 'CreatedAt', 'createdAt', coerce=to_iso, default=''),
    F('status', 'Status', 'status', coerce=bed_status, default='active'),
)


def generate_bed_no() -> str:
    return f'ER-{int(time.time() * 1000)}-{random.randint(0, 999)}'


def map_bed(record: dict) -> dict:
    bed = normalize_record(record, BED_FIELDS)
    bed['emergencyBedId'] = str(bed['id'] or '')
    return bed


def to_backend_bed(data: dict, *, creating: bool = False) -> dict:
    body: dict = {}
    for src, dst in (('emergencyBedNo', 'EmergencyBedNo'),
                     ('emergencyRoomNameNo', 'EmergencyRoomNameNo'),
                     ('emergencyRoomDescription', 'EmergencyRoomDescription')):
        value = to_str(data.get(src))
        if value:
            body[dst] = value
    if data.get('chargesPerDay') is not None:
        body['ChargesPerDay'] = to_float(data['chargesPerDay'])
    if data.get('createdBy') is not None:
        body['CreatedBy'] = to_int(data['createdBy'])
    status = to_str(data.get('status')).lower()
    if status:
        if creating:
            # new beds can only start Active or Inactive
            body['Status'] = 'Active' if status == 'active' else 'Inactive'
        elif status in BACKEND_STATUS:
            body['Status'] = BACKEND_STATUS[status]
    elif creating:
        body['Status'] = 'Active'
    return body


def list_beds(status: Optional[str] = None) -> list[dict]:
    payload = api_request('/emergency-beds', params={'status': status})
    rows = extract_records(payload)
    if rows is None:
        raise ApiError('Invalid response format from API', 502, payload)
    return [map_bed(r) for r in rows if isinstance(r, dict)]


def get_bed(bed_id: int) -> dict:
    data = unwrap(api_request(f'/emergency-beds/{bed_id}'))
    if not isinstance(data, dict) or not pick(data, ('EmergencyBedId', 'emergencyBedId')):
        raise ApiError(f'EmergencyBed with id {bed_id} not found', 404)
    return map_bed(data)


def create_bed(data: dict) -> dict:
    created = unwrap(api_request('/emergency-beds', 'POST', json_body=to_backend_bed(data, creating=True)))
    if not isinstance(created, dict):
        raise ApiError('No emergency bed data received from API', 502)
    bed = map_bed(created)
    if not bed['emergencyBedNo']:
        bed['emergencyBedNo'] = generate_bed_no()
    return bed


def update_bed(bed_id: int, data: dict) -> dict:
    if not bed_id or bed_id <= 0:
        raise InvalidRequest('Valid emergency bed ID is required for update')
    updated = unwrap(api_request(f'/emergency-beds/{bed_id}', 'PUT', json_body=to_backend_bed(data)))
    if not isinstance(updated, dict):
        raise ApiError('No emergency bed data received from API', 502)
    bed = map_bed(updated)
    if not bed['id']:
        bed['id'] = bed_id
        bed['emergencyBedId'] = str(bed_id)
    return bed


def delete_bed(bed_id: int) -> None:
    if not bed_id or bed_id <= 0:
        raise InvalidRequest(f'Invalid EmergencyBedId: {bed_id}. Cannot delete emergency bed.')
    api_request(f'/emergency-beds/{bed_id}', 'DELETE')
