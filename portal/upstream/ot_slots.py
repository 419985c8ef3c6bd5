"""OT slots adapter (``/ot-slots``)."""
from __future__ import annotations

import re
from typing import Any, Optional

from .base import ApiError, InvalidRequest, api_request, ensure_success
from .normalize import pick, to_bool, to_int, to_str

OT_ID_PATTERN = re.compile(r'^(?:OT-)?(\d+)$', re.IGNORECASE)


def parse_ot_id(value: Any) -> int:
    """``"OT-01"``, ``"1"`` and ``1`` all name OT room 1."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    match = OT_ID_PATTERN.match(to_str(value))
    if not match:
        raise InvalidRequest(f'Invalid OT ID format: {value}')
    return int(match.group(1))


def upstream_date(value: Optional[str]) -> Optional[str]:
    """The slots endpoint filters by ``DD-MM-YYYY``."""
    if not value:
        return None
    parts = value.split('-')
    if len(parts) == 3 and len(parts[0]) == 4:
        return f'{parts[2]}-{parts[1]}-{parts[0]}'
    return value


def map_ot_slot(record: dict) -> dict:
    slot_id = to_int(pick(record, ('OTSlotId', 'otSlotId', 'id')))
    ot_id = to_int(pick(record, ('OTId', 'otId')))
    allocation_id = pick(record, ('PatientOTAllocationId', 'patientOTAllocationId'))
    occupied_by = pick(record, ('OccupiedByPatientId',))
    is_available = record.get('IsAvailable')
    return {
        'id': slot_id,
        'otSlotId': f'OT-{ot_id:02d}-SLOT{slot_id:03d}',
        'otId': f'OT-{ot_id:02d}',
        'otIdNumber': ot_id,
        'otSlotNo': to_str(pick(record, ('OTSlotNo', 'otSlotNo'))),
        'otNo': pick(record, ('OTNo', 'otNo')),
        'otName': pick(record, ('OTName', 'otName')),
        'otType': pick(record, ('OTType', 'otType')),
        'slotStartTime': to_str(pick(record, ('SlotStartTime', 'slotStartTime'))),
        'slotEndTime': to_str(pick(record, ('SlotEndTime', 'slotEndTime'))),
        'status': 'Active' if to_str(pick(record, ('Status', 'status'))).lower() == 'active' else 'Inactive',
        'isAvailable': None if is_available is None else to_bool(is_available),
        'isOccupied': (is_available is not None and not to_bool(is_available, True))
        or bool(occupied_by) or bool(allocation_id),
        'availabilityStatus': pick(record, ('AvailabilityStatus', 'availabilityStatus')),
        'patientOTAllocationId': to_int(allocation_id) if allocation_id is not None else None,
        'operationStatus': pick(record, ('OperationStatus', 'operationStatus')),
        'patientId': occupied_by or pick(record, ('PatientId', 'patientId')),
        'patientNo': pick(record, ('OccupiedByPatientNo', 'PatientNo', 'patientNo')),
        'patientName': pick(record, ('PatientName', 'patientName')),
    }


def _one(payload: Any, message: str) -> dict:
    ensure_success(payload, message)
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_ot_slot(data)


def list_ot_slots(status: Optional[str] = None, ot_id: Any = None, date: Optional[str] = None) -> list[dict]:
    params = {
        'status': status,
        'otId': parse_ot_id(ot_id) if ot_id not in (None, '') else None,
        'date': upstream_date(date),
    }
    payload = api_request('/ot-slots', params=params)
    if not (isinstance(payload, dict) and payload.get('success') and isinstance(payload.get('data'), list)):
        return []
    return [map_ot_slot(r) for r in payload['data'] if isinstance(r, dict)]


def get_ot_slot(slot_id: int) -> dict:
    return _one(api_request(f'/ot-slots/{slot_id}'), f'OTSlot with id {slot_id} not found')


def _to_backend(data: dict) -> dict:
    body: dict = {}
    if data.get('otId') is not None:
        body['OTId'] = parse_ot_id(data['otId'])
    if data.get('slotStartTime') is not None:
        body['SlotStartTime'] = to_str(data['slotStartTime'])
    if data.get('slotEndTime') is not None:
        body['SlotEndTime'] = to_str(data['slotEndTime'])
    if data.get('status') is not None:
        body['Status'] = data['status']
    return body


def create_ot_slot(data: dict) -> dict:
    if data.get('otId') is None:
        raise InvalidRequest('OT ID is required')
    body = _to_backend(data)
    body.setdefault('Status', 'Active')
    return _one(api_request('/ot-slots', 'POST', json_body=body), 'Failed to create OT slot')


def update_ot_slot(slot_id: int, data: dict) -> dict:
    return _one(api_request(f'/ot-slots/{slot_id}', 'PUT', json_body=_to_backend(data)), 'Failed to update OT slot')


def delete_ot_slot(slot_id: int) -> None:
    ensure_success(api_request(f'/ot-slots/{slot_id}', 'DELETE'), 'Failed to delete OT slot')
