"""Operation theatre rooms adapter (``/ot``)."""
from __future__ import annotations

from typing import Any, Optional

from .base import ApiError, api_request, ensure_success
from .normalize import extract_records, pick, to_int, to_iso, to_str

DEFAULT_START = '08:00'
DEFAULT_END = '20:00'
# GET /ot has no single-item route; lookups scan one large page
LOOKUP_PAGE_SIZE = 100


def map_ot_room(record: dict) -> dict:
    ot_id = to_int(pick(record, ('OTId', 'otId', 'id')))
    return {
        'id': ot_id,
        'otId': f'OT-{ot_id:02d}',
        'otNo': to_str(pick(record, ('OTNo', 'otNo'))),
        'otType': to_str(pick(record, ('OTType', 'otType'))),
        'otName': to_str(pick(record, ('OTName', 'otName'))),
        'otDescription': to_str(pick(record, ('OTDescription', 'otDescription'))),
        'startTimeofDay': to_str(pick(record, ('OTStartTimeofDay', 'startTimeofDay')), DEFAULT_START),
        'endTimeofDay': to_str(pick(record, ('OTEndTimeofDay', 'endTimeofDay')), DEFAULT_END),
        'createdBy': to_str(pick(record, ('CreatedBy', 'createdBy')), '1'),
        'createdAt': to_iso(pick(record, ('CreatedAt', 'createdAt'))),
        'status': 'active' if to_str(pick(record, ('Status', 'status'))).lower() == 'active' else 'inactive',
    }


def _backend_status(value: Any) -> str:
    return 'InActive' if to_str(value).lower() == 'inactive' else 'Active'


def _created_by(value: Any) -> Optional[int]:
    return to_int(value) if to_str(value) else None


def to_backend_ot_room(data: dict, *, creating: bool = False) -> dict:
    body: dict = {}
    if creating or 'otNo' in data:
        body['OTNo'] = to_str(data.get('otNo'))
    for src, dst in (('otType', 'OTType'), ('otName', 'OTName'), ('otDescription', 'OTDescription'),
                     ('startTimeofDay', 'OTStartTimeofDay'), ('endTimeofDay', 'OTEndTimeofDay')):
        if creating or src in data:
            body[dst] = to_str(data.get(src)) or None
    if creating or 'status' in data:
        body['Status'] = _backend_status(data.get('status'))
    if creating or 'createdBy' in data:
        body['CreatedBy'] = _created_by(data.get('createdBy'))
    return body


def _one(payload: Any, message: str) -> dict:
    ensure_success(payload, message)
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_ot_room(data)


def list_ot_rooms(page: int = 1, limit: int = 10, status: Optional[str] = None,
                  ot_type: Optional[str] = None) -> dict:
    payload = api_request('/ot', params={'page': page, 'limit': limit, 'status': status, 'otType': ot_type})
    rooms: list[dict] = []
    total = total_pages = 0
    if isinstance(payload, dict) and payload.get('success'):
        rooms = [map_ot_room(r) for r in extract_records(payload) or [] if isinstance(r, dict)]
        total = to_int(payload.get('totalCount'))
        total_pages = to_int(payload.get('totalPages'))
    return {'data': rooms, 'total': total, 'page': page, 'limit': limit, 'hasMore': page < total_pages}


def list_all_ot_rooms() -> list[dict]:
    rooms: list[dict] = []
    page = 1
    while True:
        result = list_ot_rooms(page, LOOKUP_PAGE_SIZE)
        rooms.extend(result['data'])
        if not result['hasMore']:
            return rooms
        page += 1


def get_ot_room(ot_id: int) -> dict:
    for room in list_ot_rooms(1, LOOKUP_PAGE_SIZE)['data']:
        if room['id'] == ot_id:
            return room
    raise ApiError(f'OTRoom with id {ot_id} not found', 404)


def create_ot_room(data: dict) -> dict:
    body = to_backend_ot_room(data, creating=True)
    return _one(api_request('/ot', 'POST', json_body=body), 'Failed to create OT room')


def update_ot_room(ot_id: int, data: dict) -> dict:
    return _one(api_request(f'/ot/{ot_id}', 'PUT', json_body=to_backend_ot_room(data)), 'Failed to update OT room')


def delete_ot_room(ot_id: int) -> None:
    ensure_success(api_request(f'/ot/{ot_id}', 'DELETE'), 'Failed to delete OT room')
