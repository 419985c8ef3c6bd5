"""ICU beds adapter (``/icu``) and ICU occupancy summary."""
from __future__ import annotations

import logging
from typing import Any

from . import stubs
from .base import ApiError, InvalidRequest, api_request, with_stub_fallback
from .normalize import extract_records, pick, to_bool, to_int, to_iso, to_str, unwrap, yes_no

logger = logging.getLogger(__name__)

SYNTHETIC_ID_BASE = 1000000

OCCUPIED_PRIMARY_KEYS = ('occupancy', 'Occupancy', 'occupiedAdmissions', 'OccupiedAdmissions')
OCCUPIED_KEYS = ('occupiedBeds', 'OccupiedBeds', 'occupied_beds', 'occupied', 'Occupied', 'occupiedCount',
                 'OccupiedCount', 'totalOccupied', 'TotalOccupied', 'occupiedPatients', 'OccupiedPatients')
TOTAL_KEYS = ('totalBeds', 'TotalBeds', 'total_beds', 'totalCapacity', 'TotalCapacity', 'capacity', 'Capacity',
              'totalBedCount', 'TotalBedCount', 'bedCapacity', 'BedCapacity', 'maxBeds', 'MaxBeds',
              'totalICUBeds', 'TotalICUBeds')
AVAILABLE_KEYS = ('availableICUBeds', 'AvailableICUBeds', 'available_icu_beds', 'availableBeds', 'AvailableBeds',
                  'available_beds', 'availableBedCount', 'AvailableBedCount', 'available', 'Available',
                  'availableCount', 'AvailableCount', 'freeBeds', 'FreeBeds', 'vacantBeds', 'VacantBeds')
DEFAULT_TOTAL_BEDS = 15


def icu_status_for_backend(value: Any) -> str:
    lowered = to_str(value).lower()
    if lowered in ('inactive', 'in active'):
        return 'Inactive'
    return 'Active'


def map_icu_bed(record: dict, index: int = 0) -> dict:
    bed_id = to_int(pick(record, ('icuBedId', 'ICUBedId', 'id', 'Id')), SYNTHETIC_ID_BASE + index)
    created_at = to_iso(pick(record, ('createdAt', 'CreatedAt')))
    return {
        'id': to_int(pick(record, ('id', 'Id')), bed_id) or bed_id,
        'icuBedId': bed_id,
        'icuId': to_int(pick(record, ('icuId', 'ICUId', 'ICU_ID'))),
        'icuBedNo': to_str(pick(record, ('icuBedNo', 'ICUBedNo'))),
        'icuType': to_str(pick(record, ('icuType', 'ICUType'))),
        'icuRoomNameNo': to_str(pick(record, ('icuRoomNameNo', 'ICURoomNameNo'))),
        'icuDescription': to_str(pick(record, ('icuDescription', 'ICUDescription'))),
        'isVentilatorAttached': to_bool(pick(record, ('isVentilatorAttached', 'IsVentilatorAttached'))),
        'status': to_str(pick(record, ('status', 'Status')), 'active').lower(),
        'createdAt': created_at,
        'createdDate': to_iso(pick(record, ('createdDate', 'CreatedDate')), created_at),
    }


def _map_list(payload: Any) -> list[dict]:
    rows = extract_records(payload) or []
    return [map_icu_bed(r, i) for i, r in enumerate(rows) if isinstance(r, dict)]


def list_icu_beds() -> list[dict]:
    def stub() -> list[dict]:
        return _map_list(stubs.icu_beds())

    return with_stub_fallback(lambda: _map_list(api_request('/icu')), stub, label='ICU beds')


def list_by_type(icu_type: str) -> list[dict]:
    """Beds of one ICU type; any failure yields an empty list."""
    try:
        return _map_list(api_request('/icu', params={'type': icu_type}))
    except Exception as e:
        logger.error('Error fetching ICU beds of type %s: %s', icu_type, e)
        return []


def _one(payload: Any, message: str) -> dict:
    data = unwrap(payload)
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_icu_bed(data)


def get_icu_bed(icu_bed_id: int) -> dict:
    if not icu_bed_id or icu_bed_id <= 0:
        raise InvalidRequest(f'Invalid ICU bed ID: {icu_bed_id}. Cannot fetch ICU bed data.')
    return _one(api_request(f'/icu/{icu_bed_id}'), f'ICUBed with id {icu_bed_id} not found')


def create_icu_bed(data: dict) -> dict:
    bed_no, icu_type, room = (to_str(data.get(k)) for k in ('icuBedNo', 'icuType', 'icuRoomNameNo'))
    if not (bed_no and icu_type and room):
        raise InvalidRequest('ICUBedNo, ICUType, and ICURoomNameNo are required')
    body = {
        'ICUBedNo': bed_no,
        'ICUType': icu_type,
        'ICURoomNameNo': room,
        'IsVentilatorAttached': yes_no(data.get('isVentilatorAttached')),
        'Status': icu_status_for_backend(data.get('status')),
    }
    description = to_str(data.get('icuDescription'))
    if description:
        body['ICUDescription'] = description
    return _one(api_request('/icu', 'POST', json_body=body), 'No ICU bed data received from API')


def update_icu_bed(icu_id: int, data: dict) -> dict:
    if not icu_id or icu_id <= 0:
        raise InvalidRequest('Valid ICU ID is required for update')
    # the upstream requires the ventilator flag on every update
    body = {'IsVentilatorAttached': yes_no(data.get('isVentilatorAttached') is True)}
    for src, dst in (('icuBedNo', 'ICUBedNo'), ('icuType', 'ICUType'), ('icuRoomNameNo', 'ICURoomNameNo')):
        if src in data and data[src] is not None:
            body[dst] = to_str(data[src])
    if 'icuDescription' in data:
        body['ICUDescription'] = to_str(data['icuDescription']) or None
    if data.get('status') is not None:
        body['Status'] = icu_status_for_backend(data['status'])
    return _one(api_request(f'/icu/{icu_id}', 'PUT', json_body=body), 'No ICU bed data received from API')


def delete_icu_bed(icu_bed_id: int) -> None:
    if not icu_bed_id or icu_bed_id <= 0:
        raise InvalidRequest(f'Invalid ICU bed ID: {icu_bed_id}. Cannot delete ICU bed.')
    api_request(f'/icu/{icu_bed_id}', 'DELETE')


def _first_number(data: dict, keys, default):
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        try:
            return float(value) if '.' in str(value) else int(value)
        except (TypeError, ValueError, OverflowError):
            continue
    return default


def map_occupancy(payload: Any) -> dict:
    """Occupied beds are clamped to the total; available defaults to the rest."""
    data = unwrap(payload)
    if not isinstance(data, dict):
        data = {}
    total = _first_number(data, TOTAL_KEYS, DEFAULT_TOTAL_BEDS)
    occupied = _first_number(data, OCCUPIED_PRIMARY_KEYS, None)
    if occupied is None:
        occupied = _first_number(data, OCCUPIED_KEYS, 0)
    occupied = min(occupied, total)
    available = _first_number(data, AVAILABLE_KEYS, max(0, total - occupied))
    return {
        'totalPatients': occupied,
        'occupiedBeds': occupied,
        'totalBeds': total,
        'availableBeds': available,
    }


def get_occupancy() -> dict:
    return map_occupancy(api_request('/patient-icu-admissions/occupancy'))
