"""
Tolerant normalization of upstream HMS payloads.

The upstream API is inconsistent: list endpoints may answer with a bare
array, ``{"data": [...]}`` or some other array-valued key, and the same
field can arrive as ``PatientName``, ``patientName`` or ``patient_name``.
Helpers here turn any of those shapes into plain camelCase dicts and
never raise on odd input.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field as dc_field
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils.dateparse import parse_datetime, parse_date

NON_DATA_KEYS = {'success', 'message', 'status', 'code', 'error', 'errors'}

TRUE_STRINGS = {'yes', 'y', 'true', '1', 'on'}
FALSE_STRINGS = {'no', 'n', 'false', '0', 'off', ''}


def extract_records(payload: Any, keys: Sequence[str] = ('data',)) -> Optional[list]:
    """Locate the list of records inside ``payload``.

    Returns ``None`` when no list can be found so callers can tell an
    unrecognized shape apart from an empty result.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return None
    for key in keys:
        value = payload.get(key)
        if isinstance(value, list):
            return value
    for key, value in payload.items():
        if isinstance(value, list) and str(key).lower() not in NON_DATA_KEYS:
            return value
    return None


def unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and isinstance(payload.get('data'), dict):
        return payload['data']
    return payload


def _blank(value: Any) -> bool:
    return value is None or value == ''


def pick(record: Any, keys: Iterable[str], default: Any = None) -> Any:
    """First value under ``keys`` that is neither ``None`` nor ``""``."""
    if not isinstance(record, dict):
        return default
    for key in keys:
        value = record.get(key)
        if not _blank(value):
            return value
    return default


def to_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return default


def to_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return float(value)
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def to_str(value: Any, default: str = '') -> str:
    if _blank(value):
        return default
    return str(value).strip()


def to_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    return default


def to_iso(value: Any, default: str = '') -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return to_str(value, default)


def to_choice(value: Any, choices: Sequence[str], default: str) -> str:
    """Match ``value`` case-insensitively against ``choices``."""
    text = to_str(value).lower()
    for choice in choices:
        if choice.lower() == text:
            return choice
    return default


def yes_no(value: Any) -> str:
    return 'Yes' if to_bool(value) else 'No'


@dataclass(frozen=True)
class Field:
    """One logical field of a normalized record.

    ``keys`` lists the spellings to try, in order; ``coerce`` turns the raw
    value into the target type and ``default`` is used when every key is
    missing or blank.
    """
    name: str
    keys: tuple
    coerce: Optional[Callable[[Any], Any]] = None
    default: Any = dc_field(default=None)

    def read(self, record: dict) -> Any:
        raw = pick(record, self.keys)
        if raw is None:
            return self.default
        if self.coerce is None:
            return raw
        return self.coerce(raw)


def F(name: str, *keys: str, coerce: Optional[Callable[[Any], Any]] = None, default: Any = None) -> Field:
    """Shorthand for :class:`Field`; ``keys`` defaults to ``Name`` and ``name``."""
    if not keys:
        keys = (name[:1].upper() + name[1:], name)
    return Field(name, tuple(keys), coerce, default)


def normalize_record(record: dict, fields: Sequence[Field]) -> dict:
    return {f.name: f.read(record) for f in fields}


def normalize_records(payload: Any, fields: Sequence[Field], keys: Sequence[str] = ('data',)) -> list[dict]:
    records = extract_records(payload, keys) or []
    return [normalize_record(r, fields) for r in records if isinstance(r, dict)]


PAGINATION_KEYS = ('totalCount', 'total', 'totalPages')


def paginate(payload: Any, rows: list, page: int, limit: int,
             markers: Sequence[str] = PAGINATION_KEYS) -> tuple[list, int, bool]:
    """Return ``(rows, total, has_more)`` for one requested page.

    When the upstream reports any of ``markers`` the rows are taken as
    already paginated; otherwise the whole list came back and the
    requested page is sliced out of it here.
    """
    if isinstance(payload, dict) and any(k in payload for k in markers):
        total = to_int(payload.get('totalCount') or payload.get('total') or payload.get('count')) or len(rows)
        total_pages = to_int(payload.get('totalPages')) or math.ceil(total / max(limit, 1))
        return rows, total, page < total_pages
    total = len(rows)
    start = (max(page, 1) - 1) * limit
    return rows[start:start + limit], total, page * limit < total


def to_backend(data: dict, mapping: dict) -> dict:
    """Translate a camelCase DTO into the upstream's PascalCase body.

    Keys missing from ``mapping`` are ignored; ``None`` and blank strings
    are dropped and other strings are trimmed.
    """
    body: dict = {}
    for src, dst in mapping.items():
        if src not in data:
            continue
        value = data[src]
        if isinstance(value, str):
            value = value.strip()
        if _blank(value):
            continue
        body[dst] = value
    return body


def format_upstream_datetime(value: Any) -> Any:
    """Render ``value`` as ``YYYY-MM-DD HH:MM:SS`` in the local time zone.

    Strings that cannot be parsed are passed through untouched.
    """
    if isinstance(value, str):
        try:
            parsed = parse_datetime(value.strip().replace('Z', '+00:00'))
            day = None if parsed else parse_date(value.strip())
        except ValueError:
            return value
        if parsed is None:
            if day is None:
                return value
            parsed = datetime(day.year, day.month, day.day)
        value = parsed
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is not None:
        value = value.astimezone(ZoneInfo(settings.TIME_ZONE))
    return value.strftime('%Y-%m-%d %H:%M:%S')
