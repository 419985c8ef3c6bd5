"""Emergency bed slots adapter (``/emergency-bed-slots``)."""
from __future__ import annotations

from typing import Optional

from .base import ApiError, api_request
from .normalize import F, extract_records, normalize_record, to_backend, to_int, to_str

SLOT_STATUSES = ('Active', 'Inactive')


def slot_status(value) -> str:
    value = to_str(value)
    return value if value in SLOT_STATUSES else 'Active'


SLOT_FIELDS = (
    F('id', 'EmergencyBedSlotId', 'emergencyBedSlotId', coerce=to_int, default=0),
    F('emergencyBedId', 'EmergencyBedId', 'emergencyBedId', coerce=to_int, default=0),
    F('eBedSlotNo', 'EBedSlotNo', 'eBedSlotNo', coerce=to_str, default=''),
    F('eSlotStartTime', 'ESlotStartTime', 'eSlotStartTime', coerce=to_str, default=''),
    F('eSlotEndTime', 'ESlotEndTime', 'eSlotEndTime', coerce=to_str, default=''),
    F('status', 'Status', 'status', coerce=slot_status, default='Active'),
)

TO_BACKEND = {
    'emergencyBedId': 'EmergencyBedId',
    'eSlotStartTime': 'ESlotStartTime',
    'eSlotEndTime': 'ESlotEndTime',
    'status': 'Status',
}


def map_slot(record: dict) -> dict:
    slot = normalize_record(record, SLOT_FIELDS)
    slot['emergencyBedSlotId'] = str(slot['id'] or '')
    return slot


def _one(payload) -> dict:
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict) or payload.get('success') is False:
        raise ApiError('Invalid response format from API', 502, payload)
    return map_slot(data)


def list_slots(status: Optional[str] = None, emergency_bed_id: Optional[int] = None) -> list[dict]:
    payload = api_request('/emergency-bed-slots', params={'status': status, 'emergencyBedId': emergency_bed_id})
    if isinstance(payload, dict) and payload.get('success') is False:
        return []
    return [map_slot(r) for r in extract_records(payload) or [] if isinstance(r, dict)]


def list_slots_for_bed(emergency_bed_id: int) -> list[dict]:
    return list_slots(emergency_bed_id=emergency_bed_id)


def get_slot(slot_id: int) -> dict:
    return _one(api_request(f'/emergency-bed-slots/{slot_id}'))


def create_slot(data: dict) -> dict:
    body = to_backend(data, TO_BACKEND)
    body['Status'] = slot_status(body.get('Status'))
    return _one(api_request('/emergency-bed-slots', 'POST', json_body=body))


def update_slot(slot_id: int, data: dict) -> dict:
    body = to_backend({k: v for k, v in data.items() if k != 'emergencyBedId'}, TO_BACKEND)
    return _one(api_request(f'/emergency-bed-slots/{slot_id}', 'PUT', json_body=body))


def delete_slot(slot_id: int) -> None:
    api_request(f'/emergency-bed-slots/{slot_id}', 'DELETE')
