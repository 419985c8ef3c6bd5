"""Staff roles adapter (``/roles``)."""
from __future__ import annotations

from typing import Any

from . import stubs
from .base import ApiError, InvalidRequest, api_request, ensure_success, with_stub_fallback
from .normalize import F, extract_records, normalize_record, to_iso, to_str

ROLE_FIELDS = (
    F('id', 'RoleId', 'roleId', 'id', coerce=to_str, default=''),
    F('name', 'RoleName', 'roleName', 'name', coerce=to_str, default=''),
    F('description', 'RoleDescription', 'roleDescription', 'description', coerce=to_str, default=''),
    F('createdBy', 'CreatedBy', 'createdBy'),
    F('createdAt', 'CreatedAt', 'createdAt', coerce=to_iso, default=''),
)


def map_role(record: dict) -> dict:
    role = normalize_record(record, ROLE_FIELDS)
    role['isSuperAdmin'] = role['name'].lower() == 'superadmin'
    return role


def _one(payload: Any, message: str) -> dict:
    ensure_success(payload, message)
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_role(data)


def list_roles() -> list[dict]:
    def live():
        payload = ensure_success(api_request('/roles'), 'Failed to fetch roles')
        return [map_role(r) for r in extract_records(payload) or [] if isinstance(r, dict)]
    return with_stub_fallback(live, lambda: [map_role(r) for r in stubs.roles()], label='roles')


def get_role(role_id: str) -> dict:
    return _one(api_request(f'/roles/{role_id}'), 'Failed to fetch role')


def _to_backend(data: dict) -> dict:
    body: dict = {}
    if data.get('name') is not None:
        body['RoleName'] = to_str(data['name'])
    if data.get('description') is not None:
        body['RoleDescription'] = to_str(data['description'])
    if data.get('createdBy') is not None:
        body['CreatedBy'] = data['createdBy']
    return body


def create_role(data: dict) -> dict:
    if not to_str(data.get('name')):
        raise InvalidRequest('RoleName is required')
    return _one(api_request('/roles', 'POST', json_body=_to_backend(data)), 'Failed to create role')


def update_role(role_id: str, data: dict) -> dict:
    return _one(api_request(f'/roles/{role_id}', 'PUT', json_body=_to_backend(data)), 'Failed to update role')


def delete_role(role_id: str) -> None:
    ensure_success(api_request(f'/roles/{role_id}', 'DELETE'), 'Failed to delete role')
