"""
Dashboard aggregates: headline counts, weekly OPD flow, IPD room
distribution and the per-doctor appointment queue.

The dashboard must always render, so every function here answers with
stub fixtures instead of raising when the upstream misbehaves.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from django.conf import settings

from . import stubs
from .base import api_request
from .normalize import extract_records, pick, to_int, to_str, unwrap

logger = logging.getLogger(__name__)

COLOR_PALETTE = ['#3b82f6', '#8b5cf6', '#06b6d4', '#10b981', '#f59e0b', '#ef4444', '#ec4899', '#6366f1']

# stat name -> (endpoint, accepted count keys)
COUNT_ENDPOINTS = {
    'opdPatientsToday': ('/dashboard/count/today-opd',
                         ('count', 'Count', 'opdPatientsToday', 'OpdPatientsToday', 'opdPatients', 'OpdPatients')),
    'activeTokens': ('/dashboard/count/active-tokens',
                     ('count', 'Count', 'activeTokens', 'ActiveTokens', 'tokens', 'Tokens')),
    'ipdAdmissions': ('/dashboard/count/today-ipd',
                      ('count', 'Count', 'ipdAdmissions', 'IpdAdmissions', 'ipd', 'Ipd')),
    'otScheduled': ('/dashboard/count/today-scheduled',
                    ('count', 'Count', 'otScheduled', 'OtScheduled', 'ot', 'Ot')),
    'icuOccupied': ('/dashboard/icu-occupied-count',
                    ('count', 'Count', 'occupied', 'Occupied', 'icuOccupied', 'IcuOccupied')),
    'icuTotal': ('/dashboard/icu-total-count',
                 ('count', 'Count', 'total', 'Total', 'totalBeds', 'TotalBeds', 'totalICUBeds', 'TotalICUBeds')),
    'totalPatients': ('/dashboard/active-patients-count',
                      ('count', 'Count', 'totalPatients', 'TotalPatients', 'activePatients', 'ActivePatients',
                       'total', 'Total')),
}

OPD_FLOW_KEYS = ('data', 'opdFlow', 'weeklyData', 'flow', 'result', 'items', 'records')
DAY_KEYS = ('day', 'Day', 'date', 'Date', 'dayName', 'DayName', 'weekday', 'Weekday', 'dayOfWeek', 'DayOfWeek')
PATIENT_COUNT_KEYS = ('patients', 'Patients', 'count', 'Count', 'patientCount', 'PatientCount', 'value', 'Value',
                      'total', 'Total', 'opdPatients', 'OpdPatients')

ROOM_DISTRIBUTION_KEYS = ('data', 'roomDistribution', 'distribution', 'rooms', 'result', 'items', 'records')
ROOM_NAME_KEYS = ('name', 'Name', 'roomType', 'RoomType', 'wardName', 'WardName', 'roomName', 'RoomName',
                  'roomCategory', 'RoomCategory', 'category', 'Category', 'type', 'Type', 'ward', 'Ward',
                  'label', 'Label')
ROOM_VALUE_KEYS = ('value', 'Value', 'count', 'Count', 'occupancy', 'Occupancy', 'patientCount', 'PatientCount',
                   'admissions', 'Admissions', 'totalPatients', 'TotalPatients', 'occupied', 'Occupied',
                   'beds', 'Beds', 'total', 'Total')


def default_color(index: int) -> str:
    return COLOR_PALETTE[index % len(COLOR_PALETTE)]


def _number(value: Any) -> Optional[float]:
    """Numeric value or ``None`` for anything that is not a number."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def _fetch_count(name: str) -> Optional[Any]:
    endpoint, _ = COUNT_ENDPOINTS[name]
    try:
        return api_request(endpoint)
    except Exception as e:
        logger.warning('Failed to fetch %s count: %s', name, e)
        return None


def _count(payload: Any, keys) -> int:
    return to_int(pick(unwrap(payload), keys, 0))


def get_stats() -> dict:
    """Fetch the seven headline counts concurrently.

    A failing endpoint contributes ``0``; ``icuOccupied`` is rendered as
    ``"<occupied>/<total>"``.
    """
    try:
        names = list(COUNT_ENDPOINTS)
        workers = max(1, min(settings.HMS_DASHBOARD_WORKERS, len(names)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            payloads = dict(zip(names, pool.map(_fetch_count, names)))
        counts = {name: _count(payloads[name], COUNT_ENDPOINTS[name][1]) for name in names}
        return {
            'opdPatientsToday': counts['opdPatientsToday'],
            'activeTokens': counts['activeTokens'],
            'ipdAdmissions': counts['ipdAdmissions'],
            'otScheduled': counts['otScheduled'],
            'icuOccupied': f"{counts['icuOccupied']}/{counts['icuTotal']}",
            'totalPatients': counts['totalPatients'],
        }
    except Exception as e:
        logger.error('Error fetching dashboard stats: %s', e)
        return stubs.dashboard_stats()


def map_opd_flow(payload: Any) -> Optional[list[dict]]:
    """Map an OPD flow payload; ``None`` means nothing usable was found."""
    rows = extract_records(payload, OPD_FLOW_KEYS)
    if not rows:
        return None
    mapped = []
    for index, item in enumerate(rows):
        if not isinstance(item, dict):
            continue
        day = to_str(pick(item, DAY_KEYS), f'Day {index + 1}')
        patients = _number(pick(item, PATIENT_COUNT_KEYS))
        if patients is None or not day:
            continue
        mapped.append({'day': day, 'patients': patients})
    return mapped or None


def get_opd_flow() -> list[dict]:
    try:
        mapped = map_opd_flow(api_request('/dashboard/opd-patient-flow-weekly'))
    except Exception as e:
        logger.error('Error fetching OPD patient flow: %s', e)
        return stubs.opd_flow()
    if mapped is None:
        logger.warning('No usable OPD patient flow data, using stub data')
        return stubs.opd_flow()
    if not any(row['patients'] for row in mapped):
        logger.info('All OPD patient flow values are 0')
    return mapped


def map_room_distribution(payload: Any) -> Optional[list[dict]]:
    rows = extract_records(payload, ROOM_DISTRIBUTION_KEYS)
    if not rows:
        return None
    mapped = []
    for index, item in enumerate(rows):
        if not isinstance(item, dict):
            continue
        name = to_str(pick(item, ROOM_NAME_KEYS), f'Room {index + 1}')
        value = _number(pick(item, ROOM_VALUE_KEYS))
        if value is None or not name:
            continue
        color = to_str(pick(item, ('color', 'Color')), default_color(index))
        mapped.append({'name': name, 'value': value, 'color': color})
    return mapped or None


def get_room_distribution() -> list[dict]:
    try:
        mapped = map_room_distribution(api_request('/dashboard/ipd-room-distribution'))
    except Exception as e:
        logger.error('Error fetching IPD room distribution: %s', e)
        return stubs.room_distribution()
    if mapped is None:
        logger.warning('No usable IPD room distribution data, using stub data')
        return stubs.room_distribution()
    return mapped


def map_doctor_queue_item(item: dict) -> dict:
    kind = to_str(pick(item, ('type', 'Type', 'doctorType', 'DoctorType')), 'inhouse').lower()
    return {
        'doctor': to_str(pick(item, ('doctor', 'Doctor', 'doctorName', 'DoctorName'))),
        'specialty': to_str(pick(item, ('departmentName', 'DepartmentName', 'department', 'Department',
                                        'specialty', 'Specialty', 'specialization', 'Specialization'))),
        'type': 'consulting' if kind == 'consulting' else 'inhouse',
        'waiting': to_int(pick(item, ('waiting', 'Waiting', 'waitingCount', 'WaitingCount'))),
        'consulting': to_int(pick(item, ('consulting', 'Consulting', 'consultingCount', 'ConsultingCount'))),
        'completed': to_int(pick(item, ('completed', 'Completed', 'completedCount', 'CompletedCount'))),
    }


def get_doctor_queue() -> list[dict]:
    try:
        payload = api_request('/dashboard/doctor-wise-appointment-counts')
    except Exception as e:
        logger.error('Error fetching doctor queue: %s', e)
        return stubs.doctor_queue()
    rows = extract_records(payload)
    if not rows:
        logger.warning('Doctor queue returned no rows, using stub data')
        return stubs.doctor_queue()
    return [map_doctor_queue_item(r) for r in rows if isinstance(r, dict)]


def get_overview() -> dict:
    return {
        'stats': get_stats(),
        'opdFlow': get_opd_flow(),
        'roomDistribution': get_room_distribution(),
        'doctorQueue': get_doctor_queue(),
    }
