"""IPD room beds adapter (``/room-beds``)."""
from __future__ import annotations

import logging
from typing import Any, Optional

from .base import ApiError, InvalidRequest, api_request
from .normalize import F, extract_records, normalize_record, to_float, to_int, to_iso, to_str, unwrap

logger = logging.getLogger(__name__)

ACTIVE_ALIASES = {'active', 'occupied', 'available'}
INACTIVE_ALIASES = {'inactive', 'maintenance', 'unavailable'}


def room_status(value: Any) -> str:
    """Fold the upstream's various bed states into ``Active``/``Inactive``."""
    lowered = to_str(value).lower()
    if lowered in INACTIVE_ALIASES:
        return 'Inactive'
    return 'Active'


ROOM_BED_FIELDS = (
    F('id', 'id', 'Id'),
    F('roomBedId', 'RoomBedsId', 'roomBedsId', 'roomBedId', 'RoomBedId', 'id', coerce=to_int, default=0),
    F('bedNo', 'BedNo', 'bedNo', coerce=to_str, default=''),
    F('roomNo', 'RoomNo', 'roomNo', coerce=to_str, default=''),
    F('roomCategory', 'RoomCategory', 'roomCategory', coerce=to_str, default=''),
    F('roomType', 'RoomType', 'roomType', coerce=to_str, default=''),
    F('numberOfBeds', 'numberOfBeds', 'NumberOfBeds', 'NoofBeds', coerce=lambda v: to_int(v, 1) or 1, default=1),
    F('chargesPerDay', 'chargesPerDay', 'ChargesPerDay', 'Charges', 'charges', coerce=to_float, default=0.0),
    F('status', 'Status', 'status', coerce=room_status, default='Active'),
    F('createdBy', 'CreatedBy', 'createdBy', coerce=to_str, default=''),
    F('createdAt', 'CreatedAt', 'createdAt', coerce=to_iso, default=''),
)


def map_room_bed(record: dict) -> dict:
    bed = normalize_record(record, ROOM_BED_FIELDS)
    if bed['id'] is None:
        bed['id'] = bed['roomBedId']
    if bed['roomBedId'] <= 0:
        logger.warning('Room bed without a valid RoomBedsId: bedNo=%s roomNo=%s', bed['bedNo'], bed['roomNo'])
    return bed


def _one(payload: Any, message: str) -> dict:
    data = unwrap(payload)
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_room_bed(data)


def _check_id(room_bed_id: int, action: str) -> None:
    if not isinstance(room_bed_id, int) or room_bed_id <= 0:
        raise InvalidRequest(f'Invalid room bed ID (integer): {room_bed_id}. Cannot {action} room bed.')


def list_room_beds(room_no: Optional[str] = None, category: Optional[str] = None) -> list[dict]:
    payload = api_request('/room-beds', params={'roomNo': room_no, 'category': category})
    return [map_room_bed(r) for r in extract_records(payload) or [] if isinstance(r, dict)]


def get_room_bed(room_bed_id: int) -> dict:
    _check_id(room_bed_id, 'fetch')
    return _one(api_request(f'/room-beds/{room_bed_id}'), f'RoomBed with id {room_bed_id} not found')


def create_room_bed(data: dict) -> dict:
    fields = {k: to_str(data.get(k)) for k in ('bedNo', 'roomNo', 'roomCategory', 'roomType')}
    if not all(fields.values()):
        raise InvalidRequest('BedNo, RoomNo, RoomCategory, ChargesPerDay and RoomType are required')
    charges = data.get('chargesPerDay')
    if charges is None or to_float(charges, -1) < 0:
        raise InvalidRequest('ChargesPerDay must be a valid positive number')
    body = {
        'BedNo': fields['bedNo'],
        'RoomNo': fields['roomNo'],
        'RoomCategory': fields['roomCategory'],
        'RoomType': fields['roomType'],
        'ChargesPerDay': to_float(charges),
        'CreatedBy': data.get('createdBy'),
    }
    if data.get('status') is not None:
        body['Status'] = room_status(data['status'])
    return _one(api_request('/room-beds', 'POST', json_body=body), 'No room bed data received from API')


def update_room_bed(room_bed_id: int, data: dict) -> dict:
    _check_id(room_bed_id, 'update')
    body: dict = {}
    for src, dst in (('bedNo', 'BedNo'), ('roomNo', 'RoomNo'), ('roomCategory', 'RoomCategory'),
                     ('roomType', 'RoomType')):
        if data.get(src) is not None:
            body[dst] = to_str(data[src])
    if data.get('chargesPerDay') is not None:
        body['ChargesPerDay'] = to_float(data['chargesPerDay'])
    if data.get('status') is not None:
        body['Status'] = room_status(data['status'])
    if data.get('createdBy') is not None:
        body['CreatedBy'] = str(data['createdBy'])
    return _one(api_request(f'/room-beds/{room_bed_id}', 'PUT', json_body=body), 'No room bed data received from API')


def delete_room_bed(room_bed_id: int) -> None:
    _check_id(room_bed_id, 'delete')
    api_request(f'/room-beds/{room_bed_id}', 'DELETE')
